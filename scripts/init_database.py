from __future__ import annotations

from assoc_sync.db.pg.base import Base
from assoc_sync.db.pg import models as _models  # noqa: F401
from assoc_sync.db.pg.session import engine


def main() -> None:
    Base.metadata.create_all(bind=engine)
    for table in Base.metadata.sorted_tables:
        print(f"Ensured: {table.name}")


if __name__ == "__main__":
    main()
