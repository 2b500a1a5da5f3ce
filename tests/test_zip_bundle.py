from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import io
import zipfile

from ala_data.domain.services.normalization import Column, Table
from ala_data.infrastructure.export.zip_bundle import (
    build_bundle_filename,
    build_table_filename,
    iter_zip_bundle,
)


GENERATED_AT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def _table(name: str, rows: int) -> Table:
    return Table(
        name=name,
        columns=(Column("id", quoted=True), Column("value")),
        rows=[(f"row-{index}", Decimal(index) / Decimal(7)) for index in range(rows)],
    )


def _read_archive(chunks: list[bytes]) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(b"".join(chunks)))


def test_archive_holds_one_member_per_table_in_order():
    tables = [_table("swaps", 3), _table("lp_actions", 0), _table("ticks", 1)]

    archive = _read_archive(list(iter_zip_bundle(tables)))

    assert archive.namelist() == ["swaps.csv", "lp_actions.csv", "ticks.csv"]
    for table in tables:
        assert archive.read(table.filename).decode("utf-8") == table.render()
    assert archive.testzip() is None


def test_members_are_deflated():
    archive = _read_archive(list(iter_zip_bundle([_table("swaps", 50)])))

    assert archive.getinfo("swaps.csv").compress_type == zipfile.ZIP_DEFLATED


def test_large_table_round_trips_through_chunks():
    table = _table("swaps", 20000)

    chunks = list(iter_zip_bundle([table]))

    assert all(isinstance(chunk, bytes) and chunk for chunk in chunks)
    assert _read_archive(chunks).read("swaps.csv").decode("utf-8") == table.render()


def test_bundle_filename_uses_symbol_window_and_stamp():
    assert (
        build_bundle_filename(symbol="WETH", days=7, generated_at=GENERATED_AT)
        == "uniswap_v3_WETH_7days_2024-01-02T03-04-05-678Z.zip"
    )


def test_filenames_sanitize_symbol():
    assert (
        build_table_filename(table="lp_actions", symbol="a/b c", days=1, generated_at=GENERATED_AT)
        == "lp_actions_a_b_c_1days_2024-01-02T03-04-05-678Z.csv"
    )
    assert build_bundle_filename(symbol="", days=1, generated_at=GENERATED_AT).startswith(
        "uniswap_v3_UNKNOWN_1days_"
    )
