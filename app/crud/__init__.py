# app/crud/__init__.py
# Each module exposes a singleton named after the module, e.g.
# `from app.crud.promo_code_crud import promo_code_crud`.
