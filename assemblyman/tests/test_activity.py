"""
Tests for the activity sink and lot listing.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured

from assemblyman import workshop
from assemblyman.adapters import NoopActivitySink, get_activity_sink
from assemblyman.models import ActivityLog
from assemblyman.models.enums import ActivityAction
from assemblyman.services.activity import log_activity


pytestmark = pytest.mark.django_db


class TestActivitySink:
    """Tests for the configured activity sink."""

    def test_default_sink_writes_rows(self, user):
        entry = log_activity(user, ActivityAction.CREATE_ASSEMBLY, {'quantity': Decimal('3')})

        log = ActivityLog.objects.get()
        assert log.user == user
        assert log.action == ActivityAction.CREATE_ASSEMBLY
        assert log.details == {'quantity': '3'}
        assert entry.details == {'quantity': Decimal('3')}

    def test_noop_sink_discards(self, settings, user):
        settings.ASSEMBLYMAN = {
            **settings.ASSEMBLYMAN,
            'ACTIVITY_SINK': 'assemblyman.adapters.activity.NoopActivitySink',
        }

        log_activity(user, ActivityAction.DELETE_ASSEMBLY)

        assert isinstance(get_activity_sink(), NoopActivitySink)
        assert not ActivityLog.objects.exists()

    def test_bad_sink_path_is_improperly_configured(self, settings):
        settings.ASSEMBLYMAN = {
            **settings.ASSEMBLYMAN,
            'ACTIVITY_SINK': 'assemblyman.adapters.activity.MissingSink',
        }

        with pytest.raises(ImproperlyConfigured):
            get_activity_sink()


class TestListLots:
    """Tests for workshop.list_lots()."""

    def test_lists_lots_in_stock_oldest_first(self, stocked, part_a):
        lots = list(workshop.list_lots(part_a))

        assert lots == [stocked['a_acme'], stocked['a_globex']]

    def test_internal_source_filter(self, stocked, part_b):
        lots = list(workshop.list_lots(part_b, by_vendor=True))

        assert lots == [stocked['b_internal']]

    def test_empty_lots_hidden_unless_requested(self, stocked, part_b, acme):
        workshop.issue(Decimal('10'), stocked['b_acme'])

        assert stocked['b_acme'] not in workshop.list_lots(part_b)
        assert stocked['b_acme'] in workshop.list_lots(part_b, include_empty=True)
