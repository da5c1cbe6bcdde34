# travelhub/models/__init__.py
