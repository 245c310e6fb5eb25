# imageflow/routers/__init__.py
