"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.school_admin.school_admin.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    program_id, composed = container.program_service.create_program(
        name="Science track",
        periods=[
            {"type": "period", "name": "Semester 1"},
            {"type": "subject", "id": 1},
            {"type": "subject", "id": 2},
            {"type": "period", "name": "Semester 2"},
            {"type": "subject", "id": 1},
        ],
    )
    print(program_id, [(p.name, p.ordr) for p in composed.periods])
    print(container.program_service.get_periods(program_id))


if __name__ == "__main__":
    main()
