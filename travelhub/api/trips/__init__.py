# travelhub/api/trips/__init__.py
