# travelhub/api/posts/__init__.py
