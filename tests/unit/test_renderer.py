"""
Unit tests for channel rendering: traversal, element construction,
synthetic items and image collection.
"""

import json
import xml.etree.ElementTree as ET

import pytest

from tickerfeed.config import TickerConfig, TickerFeedConfig
from tickerfeed.database.models import FeedNode, ItemField
from tickerfeed.feed import ChannelNotFoundError, TickerFeedRenderer, determine_playlist_type
from tickerfeed.feed.elements import has_time_sensitive_field, is_metadata_field
from tickerfeed.feed.processors import (
    BaseProcessor,
    ComponentType,
    create_default_registry,
)
from tickerfeed.feed.repository import ContentRepository
from tests.conftest import FIXED_NOW
from tests.fixtures import ChannelFactory, ContentFactory, TemplateFactory

OFF_AIR = {"timeRanges": [{"start": "00:00", "end": "01:00"}]}
ON_AIR = {"timeRanges": [{"start": "14:00", "end": "15:00"}]}


class ExplodingProcessor(BaseProcessor):
    component_types = (ComponentType.IMAGE,)

    def process(self, item_field, component, context):
        raise RuntimeError("boom")


class ExplodingReplacement(ExplodingProcessor):
    replaces_item = True


@pytest.fixture
def renderer(db, ticker_config) -> TickerFeedRenderer:
    return TickerFeedRenderer(db, config=ticker_config)


@pytest.fixture
def channel(db) -> FeedNode:
    return ChannelFactory.create(db, "News")


def add_bucket(db, channel, playlist_name="Headlines", bucket_name="Top", playlist=None, **bucket_kwargs):
    """Playlist + bucket + content root; returns (playlist, bucket, root)."""
    playlist = playlist or ChannelFactory.create_playlist(db, channel, playlist_name)
    root = bucket_kwargs.pop("root", None) or ContentFactory.create_root(db, bucket_name)
    bucket = ChannelFactory.create_bucket(db, playlist, root, bucket_name, **bucket_kwargs)
    return playlist, bucket, root


def render(renderer, channel_name="News", **kwargs):
    return renderer.render(channel_name, now=FIXED_NOW, **kwargs)


def headlines(document) -> list[list[str]]:
    """First field value of every element, per group."""
    return [
        [element.fields[0].value for element in group.elements]
        for playlist in document.playlists
        for group in playlist.groups
    ]


@pytest.mark.unit
class TestDeterminePlaylistType:
    """Tests for determine_playlist_type."""

    def test_explicit_type(self):
        playlist = FeedNode(name="Breaking", type="playlist", playlist_type="static")
        assert determine_playlist_type(playlist) == "static"

    @pytest.mark.parametrize("name", ["Breaking News", "URGENT alerts"])
    def test_flipping(self, name):
        assert determine_playlist_type(FeedNode(name=name, type="playlist")) == "flipping_carousel"

    def test_default(self):
        assert determine_playlist_type(FeedNode(name="Sports", type="playlist")) == "scrolling_carousel"


@pytest.mark.unit
class TestFieldHelpers:
    """Tests for field classification helpers."""

    def test_metadata(self):
        assert is_metadata_field("__order") is True
        assert is_metadata_field("_order") is False
        assert is_metadata_field(None) is False

    def test_time_sensitive(self):
        assert has_time_sensitive_field([ItemField(name="headline", value="BREAKING: flood")]) is True
        assert has_time_sensitive_field([ItemField(name="liveFeed", value=None)]) is True
        assert has_time_sensitive_field([ItemField(name="headline", value="Council meets Tuesday")]) is False


@pytest.mark.unit
class TestTickerFeedRenderer:
    """Tests for TickerFeedRenderer."""

    def test_unknown_channel(self, renderer):
        with pytest.raises(ChannelNotFoundError) as exc_info:
            render(renderer, "Missing")
        assert str(exc_info.value) == 'Channel "Missing" not found'

    def test_basic_render(self, db, renderer, channel):
        template = TemplateFactory.create(db, "HEADLINE")
        _, bucket, root = add_bucket(db, channel)
        first = ContentFactory.create_item(
            db, root, {"headline": "Council meets Tuesday", "__order": "1"}, template, duration=10
        )
        ContentFactory.create_item(db, root, {"headline": "Parade on Main"})

        document = render(renderer)

        assert document.channel_name == "News"
        assert len(document.playlists) == 1
        playlist = document.playlists[0]
        assert playlist.name == "Headlines"
        assert playlist.type == "scrolling_carousel"

        group = playlist.groups[0]
        assert group.bucket_id == bucket.id
        assert group.content_id == root.id
        element = group.elements[0]
        assert element.id == first.id
        assert element.template == "HEADLINE"
        assert element.duration == "10"
        assert element.ttl is None
        assert [(f.name, f.value) for f in element.fields] == [("headline", "Council meets Tuesday")]
        assert group.elements[1].template is None
        assert group.elements[1].duration is None

    def test_order(self, db, renderer, channel):
        playlist_b = ChannelFactory.create_playlist(db, channel, "Second", order_index=2)
        playlist_a = ChannelFactory.create_playlist(db, channel, "First", order_index=1)
        for playlist in (playlist_b, playlist_a):
            _, _, root = add_bucket(db, channel, playlist=playlist, bucket_name=f"{playlist.name} bucket")
            ContentFactory.create_item(db, root, {"headline": f"{playlist.name} 2"}, order_index=2)
            ContentFactory.create_item(db, root, {"headline": f"{playlist.name} 1"}, order_index=1)

        document = render(renderer)

        assert [p.name for p in document.playlists] == ["First", "Second"]
        assert headlines(document) == [["First 1", "First 2"], ["Second 1", "Second 2"]]

    def test_empty_buckets_and_playlists_pruned(self, db, renderer, channel):
        playlist, _, root = add_bucket(db, channel, bucket_name="Full")
        ContentFactory.create_item(db, root, {"headline": "Kept"})
        add_bucket(db, channel, playlist=playlist, bucket_name="Empty")
        add_bucket(db, channel, playlist_name="Nothing here", bucket_name="Also empty")
        ChannelFactory.create_playlist(db, channel, "No buckets")

        document = render(renderer)

        assert [p.name for p in document.playlists] == ["Headlines"]
        assert [g.name for g in document.playlists[0].groups] == ["Full"]

    def test_active_flag(self, db, renderer, channel):
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "On"})
        ContentFactory.create_item(db, root, {"headline": "Off"}, active=False)
        _, _, hidden_root = add_bucket(db, channel, playlist_name="Hidden", bucket_name="Hidden", active=False)
        ContentFactory.create_item(db, hidden_root, {"headline": "Hidden item"})

        assert headlines(render(renderer)) == [["On"]]
        assert headlines(render(renderer, include_inactive=True)) == [["On", "Off"], ["Hidden item"]]

    def test_schedules_apply_at_every_level(self, db, renderer, channel):
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "On air"}, schedule=ON_AIR)
        ContentFactory.create_item(db, root, {"headline": "Off air"}, schedule=OFF_AIR)
        ContentFactory.create_item(db, root, {"headline": "Legacy"}, schedule="Hourly")

        overnight = ChannelFactory.create_playlist(db, channel, "Overnight", schedule=json.dumps(OFF_AIR))
        _, _, late_root = add_bucket(db, channel, playlist=overnight, bucket_name="Late")
        ContentFactory.create_item(db, late_root, {"headline": "Late item"})

        _, _, parked_root = add_bucket(db, channel, playlist_name="Parked", bucket_name="Parked", schedule=OFF_AIR)
        ContentFactory.create_item(db, parked_root, {"headline": "Parked item"})

        assert headlines(render(renderer)) == [["On air", "Legacy"]]

    def test_off_air_folder_hides_descendants(self, db, renderer, channel):
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "Before"}, order_index=1)
        folder = ContentFactory.create_folder(db, root, order_index=2)
        inner = ContentFactory.create_folder(db, folder, order_index=1)
        ContentFactory.create_item(db, inner, {"headline": "Nested"}, order_index=1)
        ContentFactory.create_item(db, folder, {"headline": "In folder"}, order_index=2)
        closed = ContentFactory.create_folder(db, root, order_index=3, schedule=OFF_AIR)
        ContentFactory.create_item(db, closed, {"headline": "Hidden"}, schedule=ON_AIR)
        ContentFactory.create_item(db, root, {"headline": "After"}, order_index=4)

        assert headlines(render(renderer)) == [["Before", "Nested", "In folder", "After"]]

    def test_channel_timezone_wins(self, db, renderer):
        # 14:30 UTC is 10:30 in New York
        channel = ChannelFactory.create(db, "Regional", timezone="America/New_York")
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(
            db, root, {"headline": "Morning"}, schedule={"timeRanges": [{"start": "10:00", "end": "11:00"}]}
        )

        document = render(renderer, "Regional")

        assert headlines(document) == [["Morning"]]
        context = renderer.create_context(channel)
        assert context.timezone == "America/New_York"

    def test_default_timezone_from_config(self, db, channel):
        config = TickerFeedConfig(ticker=TickerConfig(timezone="Europe/Berlin"))
        context = TickerFeedRenderer(db, config=config).create_context(channel)

        assert context.timezone == "Europe/Berlin"
        assert context.now.tzinfo is not None

    def test_time_sensitive_ttl(self, db, channel):
        config = TickerFeedConfig(ticker=TickerConfig(ttl_seconds=900))
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "BREAKING: bridge closed"})
        ContentFactory.create_item(db, root, {"headline": "Parade on Main"})

        elements = render(TickerFeedRenderer(db, config=config)).playlists[0].groups[0].elements

        assert elements[0].ttl.action == "remove"
        assert elements[0].ttl.value == "900"
        assert elements[1].ttl is None

    def test_image_fields_rewritten(self, db, channel):
        config = TickerFeedConfig(ticker=TickerConfig(image_cache_path="C:\\ticker\\images"))
        template = TemplateFactory.create(db, "PHOTO", components=[{"key": "photo", "type": "image"}])
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(
            db, root,
            {"photo": "https://cdn.example.com/a/photo.jpg", "caption": "https://cdn.example.com/b/extra.png"},
            template,
        )

        element = render(TickerFeedRenderer(db, config=config)).playlists[0].groups[0].elements[0]

        assert [(f.name, f.value) for f in element.fields] == [
            ("photo", "C:\\ticker\\images\\photo.jpg"),
            ("caption", "C:\\ticker\\images\\extra.png"),
        ]

    def test_item_replacing_component(self, db, renderer, channel):
        from tests.fixtures import SchoolClosingFactory

        SchoolClosingFactory.create(db, "Lincoln Elementary", "R1", "Z1")
        SchoolClosingFactory.create(db, "Westside High", "R2", "Z2")
        template = TemplateFactory.create(
            db, "CLOSINGS",
            components=[{"key": "closings", "type": "schoolClosings", "templateName": "CLOSING_LINE"}],
        )
        _, _, root = add_bucket(db, channel)
        item = ContentFactory.create_item(
            db, root,
            {"headline": "ignored", "closings": json.dumps({"regionId": "R1", "passthrough": True})},
            template,
        )

        group = render(renderer, region_id="R2").playlists[0].groups[0]

        assert [e.id for e in group.elements] == [f"{item.id}_closing_0"]
        assert group.elements[0].fields[0].value == "Westside High"
        assert group.elements[0].template == "CLOSING_LINE"

    def test_failing_field_processor_drops_field(self, db, channel, ticker_config):
        registry = create_default_registry()
        registry.register_processor(ExplodingProcessor(), ["explode"])
        template = TemplateFactory.create(db, "T", components=[{"key": "bad", "type": "explode"}])
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "Still here", "bad": "x"}, template)

        document = TickerFeedRenderer(db, config=ticker_config, registry=registry).render("News", now=FIXED_NOW)

        assert [(f.name, f.value) for f in document.playlists[0].groups[0].elements[0].fields] == [
            ("headline", "Still here")
        ]

    def test_failing_replacement_drops_item(self, db, channel, ticker_config):
        registry = create_default_registry()
        registry.register_processor(ExplodingReplacement(), ["explode"])
        template = TemplateFactory.create(db, "T", components=[{"key": "bad", "type": "explode"}])
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"bad": "x"}, template)
        ContentFactory.create_item(db, root, {"headline": "Survivor"})

        document = TickerFeedRenderer(db, config=ticker_config, registry=registry).render("News", now=FIXED_NOW)

        assert headlines(document) == [["Survivor"]]

    def test_failed_field_fetch_drops_only_that_item(self, db, renderer, channel, monkeypatch):
        _, _, root = add_bucket(db, channel)
        broken = ContentFactory.create_item(db, root, {"headline": "bad"})
        ContentFactory.create_item(db, root, {"headline": "good"})
        get_fields = ContentRepository.get_fields

        def flaky_get_fields(self, item_id):
            if item_id == broken.id:
                raise RuntimeError("connection lost")
            return get_fields(self, item_id)

        monkeypatch.setattr(ContentRepository, "get_fields", flaky_get_fields)

        assert headlines(render(renderer)) == [["good"]]

    def test_failed_template_fetch_drops_only_that_item(self, db, renderer, channel, monkeypatch):
        template = TemplateFactory.create(db, "HEADLINE", components=[{"key": "headline", "type": "textfield"}])
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(db, root, {"headline": "bad"}, template)
        ContentFactory.create_item(db, root, {"headline": "good"})

        def failing_get_template_form(self, template_id):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(ContentRepository, "get_template_form", failing_get_template_form)

        assert headlines(render(renderer)) == [["good"]]

    def test_render_xml(self, db, renderer, channel):
        _, _, root = add_bucket(db, channel)
        item = ContentFactory.create_item(db, root, {"headline": "Rates & taxes", "live": "true"})

        xml = renderer.render_xml("News", include_ids=True, now=FIXED_NOW)
        body = "\n".join(line for line in xml.splitlines() if not line.startswith("<!DOCTYPE"))
        element = ET.fromstring(body.encode("utf-8")).find(".//element")

        assert element.find("id").text == item.id
        assert [f.text for f in element.findall("field")] == ["Rates & taxes", "1"]
        assert element.find("ttl") is not None


@pytest.mark.unit
class TestSyntheticItems:
    """Tests for generateItem elements."""

    @pytest.fixture
    def generating_root(self, db):
        template = TemplateFactory.create(db, "BUG")
        return ContentFactory.create_root(
            db,
            "Shared",
            config={
                "generateItem": {
                    "enabled": True,
                    "templateId": template.id,
                    "fieldName": "label",
                    "fieldValue": "Top Stories",
                    "duration": 5,
                }
            },
        )

    def test_instance_numbers(self, db, renderer, channel, generating_root):
        ContentFactory.create_item(db, generating_root, {"headline": "Shared story"})
        first, _, _ = add_bucket(db, channel, playlist_name="Morning", bucket_name="A", root=generating_root)
        add_bucket(db, channel, playlist=first, bucket_name="B", root=generating_root)
        add_bucket(db, channel, playlist_name="Evening", bucket_name="C", root=generating_root)

        document = render(renderer)
        generated = [g.elements[0] for p in document.playlists for g in p.groups]

        root_id = generating_root.id
        assert [e.id for e in generated] == [f"{root_id}_0", f"{root_id}_1", f"{root_id}_2"]
        assert generated[0].template == "BUG"
        assert generated[0].duration == "5"
        assert [(f.name, f.value) for f in generated[0].fields] == [("label", "Top Stories")]
        assert all(len(g.elements) == 2 for p in document.playlists for g in p.groups)

    def test_counters_reset_per_render(self, db, renderer, channel, generating_root):
        ContentFactory.create_item(db, generating_root, {"headline": "Story"})
        add_bucket(db, channel, root=generating_root)

        first = render(renderer).playlists[0].groups[0].elements[0].id
        second = render(renderer).playlists[0].groups[0].elements[0].id

        assert first == second == f"{generating_root.id}_0"

    def test_not_generated_for_empty_bucket(self, db, renderer, channel, generating_root):
        add_bucket(db, channel, root=generating_root)

        assert render(renderer).playlists == []

    def test_failed_content_fetch_skips_generated_element(
        self, db, renderer, channel, generating_root, monkeypatch
    ):
        ContentFactory.create_item(db, generating_root, {"headline": "Story"})
        add_bucket(db, channel, root=generating_root)

        def failing_get_content_node(self, node_id):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(ContentRepository, "get_content_node", failing_get_content_node)

        assert headlines(render(renderer)) == [["Story"]]

    def test_failed_template_fetch_skips_generated_element(
        self, db, renderer, channel, generating_root, monkeypatch
    ):
        ContentFactory.create_item(db, generating_root, {"headline": "Story"})
        add_bucket(db, channel, root=generating_root)

        def failing_get_template(self, template_id):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(ContentRepository, "get_template", failing_get_template)

        assert headlines(render(renderer)) == [["Story"]]

    def test_disabled(self, db, renderer, channel):
        root = ContentFactory.create_root(db, "Plain", config={"generateItem": {"enabled": False}})
        ContentFactory.create_item(db, root, {"headline": "Story"})
        add_bucket(db, channel, root=root)

        assert headlines(render(renderer)) == [["Story"]]


@pytest.mark.unit
class TestCollectImages:
    """Tests for image listing."""

    def test_distinct_in_order(self, db, renderer, channel):
        _, _, root = add_bucket(db, channel)
        ContentFactory.create_item(
            db, root,
            {"photo": "https://cdn.example.com/b.png", "doc": "https://cdn.example.com/report.pdf"},
        )
        ContentFactory.create_item(
            db, root,
            {"photo": "https://cdn.example.com/a.JPG?x=1", "again": "https://cdn.example.com/b.png"},
        )
        ContentFactory.create_item(db, root, {"__thumb": "https://cdn.example.com/meta.png"})
        ContentFactory.create_item(db, root, {"photo": "https://cdn.example.com/off.png"}, schedule=OFF_AIR)

        images = renderer.collect_images("News", now=FIXED_NOW)

        assert images == ["https://cdn.example.com/b.png", "https://cdn.example.com/a.JPG?x=1"]

    def test_unknown_channel(self, renderer):
        with pytest.raises(ChannelNotFoundError):
            renderer.collect_images("Missing", now=FIXED_NOW)
