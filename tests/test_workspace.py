"""
Tests for decoding Notion pages into WorkspaceRecord
"""
from datetime import datetime, timezone

import pytest

from kanbanchan.exceptions import ValidationException
from kanbanchan.models.game import Status
from kanbanchan.models.workspace import (
    WorkspaceRecord,
    date_property,
    external_files_property,
    multi_select_property,
    status_property,
    title_property,
)


class TestFromPage:

    def test_decodes_all_fields(self, page_factory):
        page = page_factory('page-1', 'Hollow Knight', status='Unreleased', release_date='2017-02-24T00:00:00Z')
        record = WorkspaceRecord.from_page(page)

        assert record.page_id == 'page-1'
        assert record.title == 'Hollow Knight'
        assert record.status is Status.UNRELEASED
        assert record.status_label == 'Unreleased'
        assert record.platforms == ['Steam', 'kanbanchan']
        assert record.tags == ['Action']
        assert record.store_page_url == 'https://store.steampowered.com/app/1'
        assert record.cover_art == 'https://cdn.example.com/cover.jpg'
        assert record.release_date == '2017-02-24T00:00:00Z'
        assert record.completed_date is None
        assert record.rating == ''
        assert record.notes == 'Replay on hard'

    def test_up_next_label(self, page_factory):
        record = WorkspaceRecord.from_page(page_factory('p', 'Celeste', status='Up Next'))
        assert record.status is Status.UP_NEXT

    def test_unknown_status_label_is_kept_raw(self, page_factory):
        record = WorkspaceRecord.from_page(page_factory('p', 'Celeste', status='Abandoned'))
        assert record.status is None
        assert record.status_label == 'Abandoned'

    def test_optional_properties_may_be_absent(self):
        page = {'id': 'p', 'properties': {'Name': {'type': 'title', 'title': [{'plain_text': 'Celeste'}]}}}
        record = WorkspaceRecord.from_page(page)
        assert record.title == 'Celeste'
        assert record.release_date is None
        assert record.tags == []

    def test_missing_title_raises(self, page_factory):
        page = page_factory('p', 'Celeste')
        del page['properties']['Name']
        with pytest.raises(ValidationException):
            WorkspaceRecord.from_page(page)

    def test_empty_title_raises(self, page_factory):
        page = page_factory('p', '')
        with pytest.raises(ValidationException):
            WorkspaceRecord.from_page(page)

    def test_mistyped_optional_property_reads_as_empty(self, page_factory):
        page = page_factory('p', 'Celeste', **{
            'Release Date': {'type': 'rich_text', 'rich_text': []},
            'Rating': {'type': 'select', 'select': {'name': '5/5'}},
        })
        record = WorkspaceRecord.from_page(page)
        assert record.title == 'Celeste'
        assert record.release_date is None
        assert record.rating == ''
        assert record.notes == 'Replay on hard'

    def test_mistyped_title_raises(self, page_factory):
        page = page_factory('p', 'Celeste', Name={'type': 'rich_text', 'rich_text': [{'plain_text': 'Celeste'}]})
        with pytest.raises(ValidationException) as excinfo:
            WorkspaceRecord.from_page(page)
        assert 'Name' in excinfo.value.message

    def test_not_a_page(self):
        with pytest.raises(ValidationException):
            WorkspaceRecord.from_page(['not', 'a', 'page'])

    def test_describe(self, page_factory):
        record = WorkspaceRecord.from_page(page_factory('p', 'Celeste', status='Finished'))
        text = record.describe()
        assert 'Name: Celeste' in text
        assert 'Status: Finished' in text
        assert 'Rating: <empty>' in text


class TestPropertyBuilders:

    def test_shapes(self):
        assert title_property('Hades') == {'title': [{'type': 'text', 'text': {'content': 'Hades'}}]}
        assert status_property(Status.UP_NEXT) == {'status': {'name': 'Up Next'}}
        assert multi_select_property(['Massively Multiplayer', 'Free, to Play']) == {
            'multi_select': [{'name': 'Massively Multiplayer'}, {'name': 'Free  to Play'}]
        }
        assert date_property(datetime(2020, 9, 17, tzinfo=timezone.utc)) == {'date': {'start': '2020-09-17'}}
        files = external_files_property('https://cdn.example.com/h.jpg')
        assert files['files'][0]['external'] == {'url': 'https://cdn.example.com/h.jpg'}
        assert files['files'][0]['type'] == 'external'
