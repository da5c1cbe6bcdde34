# travelhub/api/comments/__init__.py
