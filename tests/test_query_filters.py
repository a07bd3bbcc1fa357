"""
Tests for list filters and sort helpers
"""

from datetime import datetime, timezone

import pytest

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp
from mangoclient.models.enums import DocumentStatus, SortDirection, TransactionNature, TransactionStatus
from mangoclient.utils.query_filters import (
    add_after_date_filter,
    add_before_date_filter,
    add_kyc_status_filter,
    add_kyc_type_filter,
    add_sort,
    add_transaction_nature_filter,
    add_transaction_status_filter,
    add_transaction_type_filter,
    sort_by_creation_date,
    sort_by_execution_date,
    sort_events_by_date,
)


class TestFilters:
    def test_transaction_filters_accept_enums_and_strings(self):
        params = {}
        add_transaction_nature_filter(params, TransactionNature.REFUND)
        add_transaction_status_filter(params, "SUCCEEDED")
        add_transaction_type_filter(params, "PAYOUT")
        assert params == {"Nature": "REFUND", "Status": "SUCCEEDED", "Type": "PAYOUT"}

    def test_invalid_value(self):
        with pytest.raises(ValidationError, match="invalid value PENDING for key Status") as exc_info:
            add_transaction_status_filter({}, "PENDING")
        assert exc_info.value.details["allowed"] == [s.value for s in TransactionStatus]

    def test_kyc_status_excludes_created(self):
        assert add_kyc_status_filter({}, DocumentStatus.REFUSED) == {"Status": "REFUSED"}
        with pytest.raises(ValidationError):
            add_kyc_status_filter({}, DocumentStatus.CREATED)

    def test_kyc_type(self):
        assert add_kyc_type_filter({}, "ADDRESS_PROOF") == {"Type": "ADDRESS_PROOF"}
        with pytest.raises(ValidationError):
            add_kyc_type_filter({}, "PASSPORT")

    def test_date_filters(self):
        params = {}
        add_before_date_filter(params, datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        add_after_date_filter(params, Timestamp(1600000000))
        assert params == {"BeforeDate": 1700000000, "AfterDate": 1600000000}
        assert add_after_date_filter({}, 42) == {"AfterDate": 42}

    @pytest.mark.parametrize("value", ["1700000000", 1.5, True, None])
    def test_date_filter_rejects_other_types(self, value):
        with pytest.raises(ValidationError):
            add_before_date_filter({}, value)


class TestSort:
    def test_sort_helpers(self):
        assert sort_by_creation_date({}) == {"Sort": "CreationDate:asc"}
        assert sort_by_execution_date({}, SortDirection.DESCENDING) == {"Sort": "ExecutionDate:desc"}
        assert sort_events_by_date({}, ":desc") == {"Sort": "Date:desc"}

    def test_sort_replaces_previous_sort(self):
        params = sort_by_creation_date({})
        sort_by_execution_date(params)
        assert params == {"Sort": "ExecutionDate:asc"}

    def test_invalid_key(self):
        with pytest.raises(ValidationError, match="invalid sort key"):
            add_sort({}, "Amount")

    def test_invalid_direction(self):
        with pytest.raises(ValidationError, match="invalid direction"):
            add_sort({}, "CreationDate", "up")
