# travelhub/core/__init__.py
