# travelhub/api/users/__init__.py
