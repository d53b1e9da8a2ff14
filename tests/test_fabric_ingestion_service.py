"""
tests/test_fabric_ingestion_service.py

Reading CSV/XLSX zoning tables into FabricRecords.
"""

from __future__ import annotations

import io

import pytest
from fastapi import UploadFile
from openpyxl import Workbook

from app.services.fabric_ingestion_service import (
    XLSX_CONTENT_TYPE,
    FabricFileFormatError,
    FabricIngestionService,
)
from app.validators.structure_validator import FabricStructureError
from zoning.models import FabricRecord


def _csv(*lines: str) -> bytes:
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


def _xlsx(rows: list[list[object]]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def service() -> FabricIngestionService:
    return FabricIngestionService(max_upload_bytes=1024 * 1024, log_structure_errors=True)


class TestCSV:
    def test_maps_header_vocabulary_to_fields(self, service: FabricIngestionService) -> None:
        # "Member WWN / D,P" contains a comma, so it must be quoted in CSV.
        data = _csv(
            'Fabric,Zone,Alias,"Member WWN / D,P",Logged In,Vendor,Unmapped',
            'FAB-A,z1, srv1_1s ,10:00:00:00:c9:00:00:01,Yes,Emulex,ignored',
        )

        table = service.read_bytes(data, filename="zoning.csv")

        assert table.headers[3] == "Member WWN / D,P"
        assert table.records == [
            FabricRecord(
                fabric="FAB-A",
                zone="z1",
                alias="srv1_1s",
                member_wwn="10:00:00:00:c9:00:00:01",
                logged_in="Yes",
                vendor="Emulex",
            )
        ]
        assert table.rows_read == 1

    def test_utf8_bom_is_tolerated(self, service: FabricIngestionService) -> None:
        data = b"\xef\xbb\xbf" + _csv("Fabric,Alias,Logged In", "FAB-B,h_1,no")
        table = service.read_bytes(data, filename="ZONING.CSV")
        assert table.records[0].fabric == "FAB-B"

    def test_rows_without_fabric_or_alias_are_skipped(self, service: FabricIngestionService) -> None:
        data = _csv(
            "Fabric,Alias,Logged In",
            "FAB-A,h_1,yes",
            ",h_2,yes",
            "FAB-B,,yes",
            ",,",
        )
        table = service.read_bytes(data, filename="z.csv")

        assert [record.alias for record in table.records] == ["h_1"]
        assert table.blank_rows_skipped == 2

    def test_short_rows_are_padded(self, service: FabricIngestionService) -> None:
        data = _csv("Fabric,Alias,Logged In,Vendor", "FAB-A,h_1")
        record = service.read_bytes(data, filename="z.csv").records[0]
        assert record.logged_in == ""
        assert not record.is_logged_in

    def test_header_only_file_is_rejected(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError, match="headers and at least one data row"):
            service.read_bytes(_csv("Fabric,Alias,Logged In"), filename="z.csv")

    def test_non_utf8_is_rejected(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError, match="UTF-8"):
            service.read_bytes("Fabric,Alias\nFAB-A,h\xe9_1\n".encode("latin-1"), filename="z.csv")

    def test_structure_errors_propagate(self, service: FabricIngestionService) -> None:
        data = _csv("Fabric,Alias", "FAB-X,h_1")
        with pytest.raises(FabricStructureError) as exc_info:
            service.read_bytes(data, filename="z.csv")

        assert exc_info.value.messages == [
            "Missing required column: Logged In",
            "Invalid fabric values found: FAB-X. Expected: FAB-A, FAB-B",
        ]

    def test_only_blank_data_rows_is_empty_table(self, service: FabricIngestionService) -> None:
        data = _csv("Fabric,Alias,Logged In", ",,yes")
        with pytest.raises(FabricStructureError) as exc_info:
            service.read_bytes(data, filename="z.csv")
        assert exc_info.value.messages == ["File is empty or invalid"]


class TestXLSX:
    def test_reads_first_sheet_as_text(self, service: FabricIngestionService) -> None:
        data = _xlsx(
            [
                ["Fabric", "Alias", "Member WWN / D,P", "Logged In", "Slot/Port #"],
                ["FAB-A", "srv1_1s", "10:00:00:00:c9:00:00:01", "YES", 7],
                [None, None, None, None, None],
                ["FAB-B", "srv1_2s", "10:00:00:00:c9:00:00:02", "no", None],
            ]
        )

        table = service.read_bytes(data, filename="zoning.xlsx")

        assert [record.alias for record in table.records] == ["srv1_1s", "srv1_2s"]
        assert table.records[0].slot_port == "7"
        assert table.records[0].is_logged_in
        assert table.records[1].slot_port == ""

    def test_corrupt_workbook_is_rejected(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError):
            service.read_bytes(b"not a zip archive", filename="zoning.xlsx")


class TestUploadHandling:
    def test_unsupported_extension(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError, match="Unsupported file type"):
            service.read_bytes(b"anything", filename="zoning.txt")

    def test_content_type_picks_reader_without_extension(self, service: FabricIngestionService) -> None:
        data = _csv("Fabric,Alias,Logged In", "FAB-A,h_1,yes")
        table = service.read_bytes(data, filename="zoning_export", content_type="text/csv; charset=utf-8")
        assert table.records[0].alias == "h_1"

    def test_xlsx_content_type_without_extension(self, service: FabricIngestionService) -> None:
        data = _xlsx([["Fabric", "Alias", "Logged In"], ["FAB-B", "h_2", "no"]])
        table = service.read_bytes(data, filename="export", content_type=XLSX_CONTENT_TYPE)
        assert table.records[0].fabric == "FAB-B"

    def test_extension_wins_over_content_type(self, service: FabricIngestionService) -> None:
        data = _csv("Fabric,Alias,Logged In", "FAB-A,h_1,yes")
        table = service.read_bytes(data, filename="z.csv", content_type=XLSX_CONTENT_TYPE)
        assert len(table.records) == 1

    def test_unknown_content_type_without_extension(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError, match="Unsupported file type"):
            service.read_bytes(b"anything", filename="export", content_type="text/plain")

    def test_legacy_xls(self, service: FabricIngestionService) -> None:
        with pytest.raises(FabricFileFormatError, match=".xls"):
            service.read_bytes(b"anything", filename="zoning.xls")

    def test_size_limit(self) -> None:
        small = FabricIngestionService(max_upload_bytes=16, log_structure_errors=False)
        with pytest.raises(FabricFileFormatError, match="maximum upload size"):
            small.read_bytes(_csv("Fabric,Alias,Logged In", "FAB-A,h_1,yes"), filename="z.csv")

    def test_read_upload_rewinds_file(self, service: FabricIngestionService) -> None:
        stream = io.BytesIO(_csv("Fabric,Alias,Logged In", "FAB-A,h_1,yes"))
        stream.read()
        upload = UploadFile(filename="z.csv", file=stream)

        table = service.read_upload(upload)
        assert len(table.records) == 1
