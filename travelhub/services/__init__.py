# travelhub/services/__init__.py
