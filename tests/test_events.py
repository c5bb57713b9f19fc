import random
import re
import unittest
from unittest.mock import patch, MagicMock
from datetime import datetime, timezone
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bson import ObjectId
from pymongo.errors import AutoReconnect, DuplicateKeyError, ServerSelectionTimeoutError

from event_booking.errors import (
    DuplicateSlugError,
    ErrorKind,
    EventNotFoundError,
    StoreConnectionError,
    ValidationFailure,
)
from event_booking.models import Event
from event_booking.services.events import (
    create_event,
    get_event_by_slug,
    get_similar_events_by_slug,
    list_events,
    list_events_by_date_and_mode,
    prepare_event,
    update_event,
    validate_event,
)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*-[a-z0-9]{4}$")


def make_event_data(**overrides):
    data = {
        "title": "  Cloud Native Summit  ",
        "description": "Two days of talks on Kubernetes, service meshes and platform engineering.",
        "overview": "The community summit for cloud native builders.",
        "image": "/images/event1.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA",
        "date": "2025-11-07T09:00:00Z",
        "time": "9:30 AM",
        "mode": "hybrid",
        "audience": "Platform engineers",
        "agenda": ["Keynote", "Workshops", "Networking"],
        "organizer": "CNCF",
        "tags": ["cloud", "kubernetes"],
    }
    data.update(overrides)
    return data


def make_stored_document(**overrides):
    document = {
        "_id": ObjectId(),
        "title": "Cloud Native Summit",
        "slug": "cloud-native-summit-x9k2",
        "description": "Two days of talks.",
        "overview": "The community summit.",
        "image": "/images/event1.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA",
        "date": "2025-11-07",
        "time": "09:30",
        "mode": "hybrid",
        "audience": "Platform engineers",
        "agenda": ["Keynote"],
        "organizer": "CNCF",
        "tags": ["cloud", "kubernetes"],
        "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "updatedAt": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    document.update(overrides)
    return document


class TestPrepareEvent(unittest.TestCase):

    def test_valid_event_is_normalized(self):
        event = prepare_event(make_event_data(slug="caller-slug"), rng=random.Random(5))

        self.assertEqual(event.title, "Cloud Native Summit")
        self.assertTrue(event.slug.startswith("cloud-native-summit-"))
        self.assertRegex(event.slug, SLUG_PATTERN)
        self.assertNotEqual(event.slug, "caller-slug")
        self.assertEqual(event.date, "2025-11-07")
        self.assertEqual(event.time, "09:30")
        self.assertIsNone(event.id)

    def test_missing_agenda_is_rejected(self):
        data = make_event_data()
        del data["agenda"]

        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(data)

        self.assertEqual(ctx.exception.fields, ["agenda"])
        self.assertEqual(ctx.exception.as_dict(), {"agenda": ["Agenda is required"]})

    def test_empty_tags_are_rejected(self):
        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(make_event_data(tags=[]))

        self.assertEqual(ctx.exception.as_dict(), {"tags": ["At least one tag is required"]})
        self.assertEqual(ctx.exception.kind, ErrorKind.VALIDATION)

    def test_title_over_limit_is_rejected(self):
        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(make_event_data(title="a" * 101))

        self.assertEqual(
            ctx.exception.as_dict(), {"title": ["Title cannot exceed 100 characters"]}
        )

    def test_title_at_limit_is_accepted(self):
        event = prepare_event(make_event_data(title="a" * 100))
        self.assertEqual(len(event.title), 100)

    def test_every_violation_is_reported(self):
        data = make_event_data(mode="in-person", time="25:00", venue="   ", agenda=[])
        del data["organizer"]

        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(data)

        errors = ctx.exception.as_dict()
        self.assertEqual(set(errors), {"mode", "time", "venue", "agenda", "organizer"})
        self.assertEqual(errors["mode"], ["Mode must be either online, offline, or hybrid"])
        self.assertEqual(errors["venue"], ["Venue is required"])
        self.assertEqual(errors["organizer"], ["Organizer is required"])

    def test_format_errors_carry_format_kind(self):
        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(make_event_data(date="someday", time="noon"))

        kinds = {error.field: error.kind for error in ctx.exception.errors}
        self.assertEqual(kinds, {"date": ErrorKind.FORMAT, "time": ErrorKind.FORMAT})
        self.assertEqual(ctx.exception.kind, ErrorKind.FORMAT)
        self.assertEqual(ctx.exception.as_dict()["date"], ["Invalid date format"])

    def test_agenda_items_must_be_strings(self):
        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(make_event_data(agenda=["Intro", 3, None]))

        self.assertEqual(
            ctx.exception.as_dict(), {"agenda": ["Agenda must be a list of strings"]}
        )

    def test_mode_is_not_trimmed(self):
        with self.assertRaises(ValidationFailure) as ctx:
            prepare_event(make_event_data(mode=" online "))

        self.assertEqual(
            ctx.exception.as_dict(), {"mode": ["Mode must be either online, offline, or hybrid"]}
        )

    def test_mode_is_stored_as_plain_string(self):
        event = prepare_event(make_event_data(mode="online"))
        self.assertEqual(event.mode, "online")
        self.assertIs(type(event.to_document()["mode"]), str)

    def test_validate_event_returns_schema(self):
        fields = validate_event(make_event_data())
        self.assertEqual(fields.title, "Cloud Native Summit")
        self.assertEqual(fields.time, "09:30")


class TestPrepareEventChanges(unittest.TestCase):

    def setUp(self):
        self.previous = Event.from_document(make_stored_document())

    def test_unchanged_title_keeps_slug(self):
        data = make_event_data(title="Cloud Native Summit", date="2025-11-07", time="09:30")
        event = prepare_event(data, self.previous)

        self.assertEqual(event.slug, "cloud-native-summit-x9k2")
        self.assertEqual(event.id, self.previous.id)

    def test_renamed_title_gets_new_slug(self):
        data = make_event_data(title="Cloud Native Days", date="2025-11-07", time="09:30")
        event = prepare_event(data, self.previous, rng=random.Random(9))

        self.assertTrue(event.slug.startswith("cloud-native-days-"))
        self.assertRegex(event.slug, SLUG_PATTERN)

    def test_only_changed_date_and_time_are_normalized(self):
        data = make_event_data(title="Cloud Native Summit", date="2025-11-07", time="6:00 PM")

        with patch('event_booking.models.schemas.normalize_date') as mock_normalize_date:
            event = prepare_event(data, self.previous)

        mock_normalize_date.assert_not_called()
        self.assertEqual(event.date, "2025-11-07")
        self.assertEqual(event.time, "18:00")


class TestEventOperations(unittest.TestCase):

    @patch('event_booking.services.events.get_events_collection')
    def test_create_event_inserts_document(self, mock_get_collection):
        # Setup mock
        mock_collection = MagicMock()
        inserted_id = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)
        mock_get_collection.return_value = mock_collection

        # Call the function
        event = create_event(make_event_data())

        # Assertions
        self.assertEqual(event.id, inserted_id)
        self.assertIsNotNone(event.created_at)
        self.assertEqual(event.created_at, event.updated_at)
        stored = mock_collection.insert_one.call_args[0][0]
        self.assertEqual(stored["slug"], event.slug)
        self.assertEqual(stored["date"], "2025-11-07")
        self.assertEqual(stored["time"], "09:30")
        self.assertIn("createdAt", stored)
        self.assertNotIn("_id", stored)

    @patch('event_booking.services.events.get_events_collection')
    def test_create_event_slug_collision(self, mock_get_collection):
        mock_collection = MagicMock()
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")
        mock_get_collection.return_value = mock_collection

        with self.assertRaises(DuplicateSlugError) as ctx:
            create_event(make_event_data())

        self.assertEqual(ctx.exception.kind, ErrorKind.UNIQUENESS)

    @patch('event_booking.services.events.get_events_collection')
    def test_invalid_event_is_not_stored(self, mock_get_collection):
        with self.assertRaises(ValidationFailure):
            create_event(make_event_data(tags=[]))

        mock_get_collection.return_value.insert_one.assert_not_called()

    @patch('event_booking.services.events.get_events_collection')
    def test_update_event_rederives_changed_fields(self, mock_get_collection):
        document = make_stored_document()
        mock_collection = MagicMock()
        mock_collection.find_one.return_value = document
        mock_get_collection.return_value = mock_collection

        event = update_event(str(document["_id"]), {"title": "Cloud Native Days", "time": "7:00 PM"})

        self.assertEqual(event.id, document["_id"])
        self.assertTrue(event.slug.startswith("cloud-native-days-"))
        self.assertEqual(event.time, "19:00")
        self.assertEqual(event.date, "2025-11-07")
        self.assertEqual(event.created_at, document["createdAt"])
        self.assertGreater(event.updated_at, document["updatedAt"])
        mock_collection.replace_one.assert_called_once()
        self.assertEqual(mock_collection.replace_one.call_args[0][0], {"_id": document["_id"]})

    @patch('event_booking.services.events.get_events_collection')
    def test_update_missing_event(self, mock_get_collection):
        mock_get_collection.return_value.find_one.return_value = None

        with self.assertRaises(EventNotFoundError):
            update_event(ObjectId(), {"title": "Anything"})

        with self.assertRaises(EventNotFoundError):
            update_event("not-an-id", {"title": "Anything"})

    @patch('event_booking.services.events.get_events_collection')
    def test_get_event_by_slug(self, mock_get_collection):
        document = make_stored_document()
        mock_get_collection.return_value.find_one.return_value = document

        event = get_event_by_slug("cloud-native-summit-x9k2")

        self.assertEqual(event.slug, "cloud-native-summit-x9k2")
        mock_get_collection.return_value.find_one.assert_called_once_with(
            {"slug": "cloud-native-summit-x9k2"}
        )

    @patch('event_booking.services.events.get_events_collection')
    def test_get_event_by_unknown_slug(self, mock_get_collection):
        mock_get_collection.return_value.find_one.return_value = None
        self.assertIsNone(get_event_by_slug("nope"))

    @patch('event_booking.services.events.get_events_collection')
    def test_list_events_newest_first(self, mock_get_collection):
        mock_cursor = MagicMock()
        mock_cursor.limit.return_value = [make_stored_document(), make_stored_document()]
        mock_get_collection.return_value.find.return_value.sort.return_value = mock_cursor

        events = list_events(limit=2)

        self.assertEqual(len(events), 2)
        mock_get_collection.return_value.find.return_value.sort.assert_called_once_with(
            "createdAt", -1
        )
        mock_cursor.limit.assert_called_once_with(2)

    @patch('event_booking.services.events.get_events_collection')
    def test_similar_events_share_tags(self, mock_get_collection):
        document = make_stored_document()
        mock_collection = mock_get_collection.return_value
        mock_collection.find_one.return_value = document
        mock_collection.find.return_value.limit.return_value = [
            make_stored_document(slug="kubecon-a1b2")
        ]

        similar = get_similar_events_by_slug(document["slug"])

        self.assertEqual([event.slug for event in similar], ["kubecon-a1b2"])
        query = mock_collection.find.call_args[0][0]
        self.assertEqual(query["_id"], {"$ne": document["_id"]})
        self.assertEqual(query["tags"], {"$in": ["cloud", "kubernetes"]})

    @patch('event_booking.services.events.get_events_collection')
    def test_create_event_store_failure(self, mock_get_collection):
        mock_get_collection.return_value.insert_one.side_effect = ServerSelectionTimeoutError("down")

        with self.assertRaises(StoreConnectionError) as ctx:
            create_event(make_event_data())

        self.assertEqual(ctx.exception.kind, ErrorKind.CONNECTION)

    @patch('event_booking.services.events.get_events_collection')
    def test_update_event_store_failure(self, mock_get_collection):
        mock_collection = mock_get_collection.return_value
        mock_collection.find_one.return_value = make_stored_document()
        mock_collection.replace_one.side_effect = AutoReconnect("connection reset")

        with self.assertRaises(StoreConnectionError) as ctx:
            update_event(ObjectId(), {"time": "8:00 PM"})

        self.assertEqual(ctx.exception.kind, ErrorKind.CONNECTION)

    @patch('event_booking.services.events.get_events_collection')
    def test_update_event_lookup_store_failure(self, mock_get_collection):
        mock_get_collection.return_value.find_one.side_effect = AutoReconnect("connection reset")

        with self.assertRaises(StoreConnectionError):
            update_event(ObjectId(), {"time": "8:00 PM"})

    @patch('event_booking.services.events.get_events_collection')
    def test_list_by_date_and_mode_normalizes_date(self, mock_get_collection):
        mock_get_collection.return_value.find.return_value = [make_stored_document()]

        events = list_events_by_date_and_mode("Nov 7 2025", "hybrid")

        self.assertEqual(len(events), 1)
        mock_get_collection.return_value.find.assert_called_once_with(
            {"date": "2025-11-07", "mode": "hybrid"}
        )

    @patch('event_booking.services.events.get_events_collection')
    def test_list_by_date_and_mode_rejects_bad_date(self, mock_get_collection):
        with self.assertRaises(ValidationFailure) as ctx:
            list_events_by_date_and_mode("someday", "online")

        self.assertEqual(ctx.exception.kind, ErrorKind.FORMAT)
        self.assertEqual(ctx.exception.fields, ["date"])
        mock_get_collection.return_value.find.assert_not_called()


if __name__ == '__main__':
    unittest.main()
