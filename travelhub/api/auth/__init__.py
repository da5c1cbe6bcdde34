# travelhub/api/auth/__init__.py
