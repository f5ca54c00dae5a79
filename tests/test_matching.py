"""Asset matching conventions."""

from aiaio_core.assets import matching
from aiaio_core.domain_models import Asset
from conftest import make_asset


def letter_image(asset_id, letter, image_type, child_name=None, created_at="2024-01-01"):
    metadata = {"template": "letter-hunt", "targetLetter": letter, "imageType": image_type}
    if child_name:
        metadata["child_name"] = child_name
    return make_asset(asset_id, status="approved", metadata=metadata, created_at=created_at)


def test_safe_zones_merged_from_all_locations():
    asset = {
        "safe_zone": "left_safe",
        "metadata": {
            "safe_zone": ["right_safe", "left_safe"],
            "review": {"safe_zone": ["center_safe", None, ""]},
        },
    }
    assert matching.get_asset_safe_zones(asset) == ["left_safe", "right_safe", "center_safe"]
    assert matching.get_asset_safe_zones({}) == []


def test_template_fit_by_metadata_or_keywords():
    assert matching.is_asset_appropriate_for_template({"metadata": {"template": "lullaby"}}, "lullaby")
    assert matching.is_asset_appropriate_for_template({"theme": "Moon and Stars"}, "lullaby")
    assert matching.is_asset_appropriate_for_template({"tags": ["Alphabet"]}, "letter-hunt")
    assert matching.is_asset_appropriate_for_template({"metadata": {"tags": ["night sky"]}}, "lullaby")
    assert not matching.is_asset_appropriate_for_template({"theme": "Dinosaurs"}, "lullaby")
    assert not matching.is_asset_appropriate_for_template({"theme": "calm"}, "unknown-template")


def test_purpose_theme_fit():
    assert matching.is_asset_theme_appropriate({"theme": "Soft melody"}, "background_music")
    assert matching.is_asset_theme_appropriate({"tags": ["Goodbye"]}, "outro_audio")
    assert not matching.is_asset_theme_appropriate({"theme": "Trucks"}, "intro_audio")


def test_relevance_score():
    asset = {
        "theme": "Calm lullaby",
        "tags": ["sleep"],
        "safe_zone": "slideshow",
        "metadata": {"safe_zone": "slideshow", "review": {"safe_zone": "frame"}},
    }
    # 10 (lullaby music) + 5 + 3 (safe zone) + 2 (calm in theme) + 1 (sleep tag)
    assert matching.theme_relevance_score(asset, "background_music", "slideshow") == 21
    assert matching.theme_relevance_score({"theme": "Trucks"}, "background_music") == 0


def test_letter_themes():
    assert matching.is_simple_letter_theme("Letter A")
    assert not matching.is_simple_letter_theme("Letter A Alligator")
    assert not matching.is_simple_letter_theme("letter a")
    assert not matching.is_simple_letter_theme(None)
    assert matching.has_letter_reference("Ava learns Letter A")
    assert not matching.has_letter_reference("Letters everywhere")


def test_find_letter_hunt_assets_prefers_child_then_newest():
    rows = [
        letter_image("generic-old", "A", "titleCard", created_at="2024-01-01"),
        letter_image("generic-new", "A", "titleCard", created_at="2024-02-01"),
        letter_image("ava-sign", "A", "signImage", child_name="Ava", created_at="2023-01-01"),
        letter_image("generic-sign", "A", "signImage", created_at="2024-03-01"),
        letter_image("ben-book", "A", "bookImage", child_name="Ben"),
        letter_image("b-title", "B", "titleCard"),
        make_asset("pending", status="pending", metadata={"template": "letter-hunt", "targetLetter": "A", "imageType": "groceryImage"}),
    ]
    found = matching.find_letter_hunt_assets(rows, "a", child_name="ava")

    assert found["titleCard"].id == "generic-new"
    assert found["signImage"].id == "ava-sign"
    assert found["bookImage"] is None
    assert found["groceryImage"] is None
    assert matching.missing_letter_hunt_slots(found) == [
        "bookImage",
        "groceryImage",
        "endingImage",
        *matching.LETTER_HUNT_AUDIO_PURPOSES,
    ]


def test_find_letter_hunt_assets_fills_audio_slots():
    rows = [
        make_asset(
            "title-audio",
            type="audio",
            status="approved",
            metadata={"template": "letter-hunt", "targetLetter": "A", "assetPurpose": "titleAudio"},
        ),
        make_asset(
            "legacy-intro",
            type="audio",
            status="approved",
            metadata={
                "template": "letter-hunt",
                "targetLetter": "A",
                "template_context": {"asset_purpose": "introAudio"},
            },
        ),
        make_asset(
            "unclassified",
            type="audio",
            status="approved",
            metadata={"template": "letter-hunt", "targetLetter": "A"},
        ),
    ]
    found = matching.find_letter_hunt_assets(rows, "A")

    assert found["titleAudio"].id == "title-audio"
    assert found["introAudio"].id == "legacy-intro"
    missing = matching.missing_letter_hunt_slots(found)
    assert "titleAudio" not in missing
    assert "signAudio" in missing
    assert "titleCard" in missing


def test_letter_hunt_slot_ignores_purpose_on_images():
    image = Asset.from_row(make_asset("i1", metadata={"assetPurpose": "titleAudio"}))
    assert matching.letter_hunt_slot(image) is None


def test_find_letter_hunt_assets_without_child_skips_personalized():
    rows = [letter_image("ava-title", "C", "titleCard", child_name="Ava")]
    found = matching.find_letter_hunt_assets(rows, "C")
    assert found["titleCard"] is None


def test_audit_and_purpose_marker():
    audio = [
        make_asset("a1", type="audio", metadata={"assetPurpose": "titleAudio"}),
        make_asset("a2", type="audio", metadata={"template_context": {"asset_purpose": "introAudio"}}),
        make_asset("a3", type="audio", metadata={}),
    ]
    images = [
        make_asset("i1", metadata={"imageType": "signImage"}),
        make_asset("i2", metadata={}),
    ]
    audit = matching.audit_letter_hunt_metadata(audio, images)

    assert [a.id for a in audit["audio_missing_purpose"]] == ["a3"]
    assert [a.id for a in audit["image_missing_type"]] == ["i2"]

    markers = [matching.purpose_status_marker(Asset.from_row(row)) for row in audio]
    assert markers == ["✅", "🔄", "❌"]
