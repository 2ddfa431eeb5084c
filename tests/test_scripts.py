from pathlib import Path

from errors import SinkWriteError
from models import Accident, RedZone
from scripts import calculate_red_zones, import_accidents


def test_calculate_red_zones_script(db) -> None:
    db.add_all([
        Accident(latitude=19.0760, longitude=72.8777, severity=5),
        Accident(latitude=19.0765, longitude=72.8780, severity=3),
        Accident(latitude=19.0770, longitude=72.8772, severity=1),
    ])
    db.commit()

    assert calculate_red_zones.main() == 0
    assert db.query(RedZone).count() == 1


def test_calculate_red_zones_script_exits_nonzero_on_failure(monkeypatch) -> None:
    def fail(db):
        raise SinkWriteError("insert", "disk I/O error")

    monkeypatch.setattr(calculate_red_zones, "update_red_zones", fail)

    assert calculate_red_zones.main() == 1


def test_import_accidents_script(db, tmp_path: Path) -> None:
    path = tmp_path / "accidents.csv"
    path.write_text(
        "City,Location,Date,Time,Latitude,Longitude,Severity\n"
        "Mumbai,Kurla,2024-02-01,09:15,19.0728,72.8826,High\n",
        encoding="utf-8",
    )

    assert import_accidents.main([str(path)]) == 0
    assert db.query(Accident).count() == 1


def test_import_accidents_script_missing_file(tmp_path: Path) -> None:
    assert import_accidents.main([str(tmp_path / "nope.csv")]) == 1


def test_import_accidents_script_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    assert import_accidents.main([str(path)]) == 0
