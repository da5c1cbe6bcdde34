# travelhub/api/__init__.py
