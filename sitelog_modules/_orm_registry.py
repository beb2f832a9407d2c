"""
Module ORM Registry (``sitelog_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table definition before tables are
created.  Also provides ``create_all_tables()`` -- the entry point
scripts and tests use to get the complete schema.

Architecture position
---------------------
**Modules layer** -- utility.  Imports sibling ``sitelog_modules``
packages and ``sitelog_kernel.db.engine`` (allowed: modules -> kernel).
"""


def import_all_orm_models() -> None:
    """Import every ``sitelog_modules.*.orm`` module. Idempotent."""
    # fmt: off
    import sitelog_modules.project.orm  # noqa: F401
    import sitelog_modules.logs.orm  # noqa: F401
    # fmt: on


def create_all_tables() -> None:
    """Register all module ORM models, then create every table.

    Preconditions:
        Engine must be initialized via ``init_engine_from_url()``.
    """
    from sitelog_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
