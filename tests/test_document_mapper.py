"""Tests for the document mapper and its scalar converters."""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

import bson
import pytest
from pydantic import BaseModel

from variant_dbenv.core.exceptions import MappingError
from variant_dbenv.domain.models.submitted_variant import SubmittedVariant
from variant_dbenv.infrastructure.db.converters import (
    datetime_from_string,
    default_converters,
    make_date_from_string,
)
from variant_dbenv.infrastructure.db.document_mapper import DocumentMapper, build_document_mapper


@dataclass
class Location:
    contig: str
    start: int


@dataclass
class Snapshot:
    id: str
    taken_on: date
    taken_at: datetime
    labels: Dict[str, str] = field(default_factory=dict)
    locations: List[Location] = field(default_factory=list)
    note: Optional[str] = None


class Annotation(BaseModel):
    id: str
    source: str
    created: Optional[datetime] = None


@pytest.fixture
def mapper() -> DocumentMapper:
    return build_document_mapper(default_converters(timezone.utc))


@pytest.fixture
def snapshot() -> Snapshot:
    return Snapshot(
        id="snap-1",
        taken_on=date(2021, 3, 4),
        taken_at=datetime(2021, 3, 4, 10, 11, 12, 345678),
        labels={"source.assembly": "GCA_000001405.15", "tool": "remapper"},
        locations=[Location("chr1", 100), Location("chr2", 200)],
    )


class TestFinalize:

    def test_unfinalized_mapper_cannot_be_used(self, snapshot):
        mapper = DocumentMapper(default_converters(timezone.utc))

        with pytest.raises(RuntimeError):
            mapper.to_document(snapshot)
        with pytest.raises(RuntimeError):
            mapper.from_document({"_id": "x"}, Snapshot)

    def test_finalize_requires_both_date_converters(self):
        mapper = DocumentMapper({datetime: datetime_from_string})

        with pytest.raises(ValueError):
            mapper.finalize()

    def test_finalize_rejects_dot_as_replacement(self):
        mapper = DocumentMapper(default_converters(timezone.utc), map_key_dot_replacement=".")

        with pytest.raises(ValueError):
            mapper.finalize()

    def test_registers_exactly_two_converters(self, mapper):
        assert mapper.is_finalized
        assert set(mapper.converters) == {datetime, date}


class TestWrite:

    def test_id_stored_as_mongo_id(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert doc["_id"] == "snap-1"
        assert "id" not in doc

    def test_no_type_discriminator(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert "_class" not in doc
        assert "_class" not in doc["locations"][0]

    def test_dates_are_leaf_values(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert doc["taken_on"] == datetime(2021, 3, 4)
        assert doc["taken_at"] == snapshot.taken_at

    def test_dots_in_mapping_keys_replaced(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert doc["labels"] == {"source#assembly": "GCA_000001405.15", "tool": "remapper"}

    def test_nested_objects_become_sub_documents(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert doc["locations"] == [{"contig": "chr1", "start": 100}, {"contig": "chr2", "start": 200}]

    def test_absent_values_not_stored(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)

        assert "note" not in doc

    def test_field_metadata_sets_stored_key(self, mapper):
        variant = SubmittedVariant("GCA_1", 9606, "PRJEB1", "chr1", 100, "A", "T", id="H1", clustered_variant_accession=5)

        doc = mapper.to_document(variant)

        assert doc["seq"] == "GCA_1"
        assert doc["tax"] == 9606
        assert doc["study"] == "PRJEB1"
        assert doc["rs"] == 5
        assert "reference_sequence_accession" not in doc

    def test_unsupported_value_raises_mapping_error(self, mapper, snapshot):
        snapshot.labels = {"bad": object()}

        with pytest.raises(MappingError):
            mapper.to_document(snapshot)


class TestRead:

    def test_round_trip(self, mapper, snapshot):
        restored = mapper.from_document(mapper.to_document(snapshot), Snapshot)

        assert restored == snapshot

    def test_round_trip_through_bson(self, mapper, snapshot):
        raw = bson.encode(mapper.to_document(snapshot), codec_options=mapper.codec_options)
        restored = mapper.from_document(bson.decode(raw, codec_options=mapper.codec_options), Snapshot)

        # BSON datetimes have millisecond precision
        assert restored.taken_at == snapshot.taken_at.replace(microsecond=345000)
        assert restored.taken_on == snapshot.taken_on
        assert restored.labels == snapshot.labels

    def test_aware_datetime_round_trip_through_bson(self, mapper, snapshot):
        snapshot.taken_at = datetime(2020, 1, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))

        doc = mapper.to_document(snapshot)
        raw = bson.encode(doc, codec_options=mapper.codec_options)
        restored = mapper.from_document(bson.decode(raw, codec_options=mapper.codec_options), Snapshot)

        assert doc["taken_at"] == datetime(2020, 1, 1, 12, 30)
        assert restored.taken_at == datetime(2020, 1, 1, 12, 30)
        assert restored.taken_at.replace(tzinfo=timezone.utc) == snapshot.taken_at

    def test_string_and_native_datetimes_are_comparable(self, mapper):
        native = mapper.from_document(
            {"_id": "a", "taken_on": datetime(2020, 1, 1), "taken_at": datetime(2020, 1, 1, 12)}, Snapshot
        )
        encoded = mapper.from_document(
            {"_id": "b", "taken_on": "2020-01-01", "taken_at": "2020-01-01T12:00:00Z"}, Snapshot
        )

        assert native.taken_at == encoded.taken_at
        assert not native.taken_at < encoded.taken_at

    def test_placeholder_in_original_key_reads_back_as_dot(self, mapper, snapshot):
        snapshot.labels = {"issue#42": "open"}

        restored = mapper.from_document(mapper.to_document(snapshot), Snapshot)

        assert restored.labels == {"issue.42": "open"}

    def test_type_discriminator_ignored(self, mapper, snapshot):
        doc = mapper.to_document(snapshot)
        doc["_class"] = "uk.ac.ebi.eva.Snapshot"

        assert mapper.from_document(doc, Snapshot) == snapshot

    def test_string_dates_converted(self, mapper):
        doc = {"_id": "s", "taken_on": "2019-05-01T23:30:00", "taken_at": "2019-05-01T23:30:00.250"}

        restored = mapper.from_document(doc, Snapshot)

        assert restored.taken_on == date(2019, 5, 1)
        assert restored.taken_at == datetime(2019, 5, 1, 23, 30, 0, 250000)

    def test_malformed_string_date_raises_mapping_error(self, mapper):
        doc = {"_id": "s", "taken_on": "yesterday", "taken_at": "2019-05-01T23:30:00"}

        with pytest.raises(MappingError) as exc_info:
            mapper.from_document(doc, Snapshot)

        assert exc_info.value.field == "Snapshot.taken_on"
        assert exc_info.value.value == "yesterday"

    def test_missing_required_field_raises_mapping_error(self, mapper):
        with pytest.raises(MappingError):
            mapper.from_document({"_id": "s"}, Snapshot)

    def test_pydantic_models(self, mapper):
        annotation = Annotation(id="a1", source="dbSNP", created=datetime(2020, 1, 2, 3, 4, 5))

        doc = mapper.to_document(annotation)

        assert doc == {"_id": "a1", "source": "dbSNP", "created": datetime(2020, 1, 2, 3, 4, 5)}
        assert mapper.from_document(doc, Annotation) == annotation

    def test_submitted_variant_round_trip(self, mapper):
        variant = SubmittedVariant(
            "GCA_1", 9606, "PRJEB1", "chr1", 100, "A", "T",
            id="H1",
            remapping_attributes={"remapped.from": "GCA_0"},
            created_date=datetime(2018, 1, 1, 12, 0),
        )

        doc = mapper.to_document(variant)

        assert doc["remappingAttributes"] == {"remapped#from": "GCA_0"}
        assert mapper.from_document(doc, SubmittedVariant) == variant


class TestConverters:

    def test_none_in_none_out(self):
        assert datetime_from_string(None) is None
        assert make_date_from_string(timezone.utc)(None) is None

    def test_datetime_from_string(self):
        assert datetime_from_string("2020-02-29T08:15:00") == datetime(2020, 2, 29, 8, 15)

    def test_datetime_with_offset_becomes_naive_utc(self):
        assert datetime_from_string("2020-02-29T08:15:00Z") == datetime(2020, 2, 29, 8, 15)
        assert datetime_from_string("2020-02-29T08:15:00+02:00") == datetime(2020, 2, 29, 6, 15)

    def test_date_uses_local_midnight(self):
        tokyo = timezone(timedelta(hours=9))
        to_date = make_date_from_string(tokyo)

        assert to_date("2020-01-01T20:00:00Z") == date(2020, 1, 2)
        assert to_date("2020-01-01T20:00:00") == date(2020, 1, 1)

    def test_malformed_input_raises_value_error(self):
        with pytest.raises(ValueError):
            datetime_from_string("01/02/2020")
