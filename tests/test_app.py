import io
from dataclasses import asdict

import pytest
from PIL import Image

from paint_mixer import config
from paint_mixer.app import create_app
from paint_mixer.infrastructure.store import STORE


@pytest.fixture
def client():
    saved = asdict(config.SETTINGS)
    STORE.clear()
    app = create_app()
    app.config["TESTING"] = True
    yield app.test_client()
    for name, value in saved.items():
        setattr(config.SETTINGS, name, value)
    STORE.clear()


def _upload(color=(34, 139, 34), size=(40, 20)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, "PNG")
    buffer.seek(0)
    return {"image": (buffer, "swatch.png")}


def test_recipe_from_hex(client):
    response = client.get("/api/recipe", query_string={"color": "#FF6B6B"})

    assert response.status_code == 200
    data = response.get_json()
    assert data["color"] == "#FF6B6B"
    assert data["rgb"] == [255, 107, 107]
    assert data["parts"] == {"cyan": 0, "magenta": 6, "yellow": 6, "black": 0, "white": 4}
    assert data["total"] == 16
    assert data["instructions"] == "6 parts Magenta + 6 parts Yellow + 4 parts White"
    assert data["visual"]["magenta"] == [True] * 6 + [False] * 4


def test_recipe_from_channels(client):
    response = client.get("/api/recipe", query_string={"r": 255, "g": 255, "b": 255})

    assert response.get_json()["instructions"] == "10 parts White"


@pytest.mark.parametrize(
    "query",
    [{"color": "#ZZZZZZ"}, {"r": 300, "g": 0, "b": 0}, {"r": 1, "g": 2}, {}],
)
def test_recipe_rejects_bad_input(client, query):
    response = client.get("/api/recipe", query_string=query)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_presets_include_recipes(client):
    presets = client.get("/api/presets").get_json()["presets"]

    assert len(presets) == 8
    sky = presets[0]
    assert sky["name"] == "Sky Blue"
    assert sky["recipe"]["parts"] == {"cyan": 4, "magenta": 1, "yellow": 0, "black": 1, "white": 5}


def test_upload_and_pick_pixel(client):
    response = client.post("/api/images", data=_upload(), content_type="multipart/form-data")

    assert response.status_code == 201
    data = response.get_json()
    assert (data["width"], data["height"]) == (40, 20)

    picked = client.get(f"/api/images/{data['token']}/pixel", query_string={"x": 5, "y": 5})
    assert picked.status_code == 200
    assert picked.get_json()["parts"] == {"cyan": 8, "magenta": 0, "yellow": 8, "black": 2, "white": 0}

    scaled = client.get(
        f"/api/images/{data['token']}/pixel",
        query_string={"x": 399, "y": 199, "display_width": 400, "display_height": 200},
    )
    assert scaled.status_code == 200


def test_pick_pixel_errors(client):
    token = client.post("/api/images", data=_upload(), content_type="multipart/form-data").get_json()["token"]

    assert client.get("/api/images/unknown/pixel", query_string={"x": 1, "y": 1}).status_code == 404
    assert client.get(f"/api/images/{token}/pixel", query_string={"x": 1}).status_code == 400
    assert client.get(f"/api/images/{token}/pixel", query_string={"x": 99, "y": 1}).status_code == 400


def test_upload_rejects_non_images(client):
    missing = client.post("/api/images", data={}, content_type="multipart/form-data")
    garbage = client.post(
        "/api/images",
        data={"image": (io.BytesIO(b"plain text"), "notes.txt")},
        content_type="multipart/form-data",
    )

    assert missing.status_code == 400
    assert garbage.status_code == 400


def test_upload_too_large(client):
    assert client.patch("/settings", json={"max_upload_bytes": 64}).status_code == 200

    response = client.post("/api/images", data=_upload(), content_type="multipart/form-data")

    assert response.status_code == 413


def test_index_renders_session_from_query(client):
    response = client.get("/", query_string={"color": "#228B22", "name": "Forest Green"})

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "To create Forest Green:" in html
    assert "8 parts Cyan + 8 parts Yellow + 2 parts Black" in html
    assert "Upload Photo" in html


def test_index_ignores_malformed_color(client):
    html = client.get("/", query_string={"color": "#ZZZZZZ"}).get_data(as_text=True)

    assert 'value="#FF6B6B"' in html
    assert "6 parts Magenta + 6 parts Yellow + 4 parts White" in html


def test_index_escapes_color_name(client):
    html = client.get("/", query_string={"name": "<b>bold</b>"}).get_data(as_text=True)

    assert "<b>bold</b>" not in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html


def test_form_upload_then_click_to_pick(client):
    response = client.post(
        "/upload",
        query_string={"color": "#FF6B6B", "name": "Hedge"},
        data=_upload(color=(255, 255, 255)),
        content_type="multipart/form-data",
    )

    assert response.status_code == 302
    location = response.headers["Location"]
    assert "image=" in location

    token = location.split("image=")[1].split("&")[0]
    assert client.get(f"/image/{token}").mimetype == "image/png"

    page = client.get(location).get_data(as_text=True)
    assert "Click anywhere on the image to pick a color" in page

    picked = client.get("/pick", query_string={"image": token, "name": "Hedge", "pt.x": 3, "pt.y": 4})
    assert picked.status_code == 302
    assert "color=%23FFFFFF" in picked.headers["Location"]
    assert "name=Hedge" in picked.headers["Location"]


def test_pick_with_expired_image_closes_picker(client):
    response = client.get("/pick", query_string={"image": "gone", "pt.x": 1, "pt.y": 1})

    assert response.status_code == 302
    assert "image=" not in response.headers["Location"]


def test_unknown_image_is_404(client):
    assert client.get("/image/nothing").status_code == 404


def test_health(client):
    data = client.get("/health").get_json()

    assert data["ok"] is True
    assert data["uploads"] == 0


def test_settings_patch_updates_and_reports_errors(client):
    response = client.patch(
        "/settings",
        json={"canvas_max_width": "300", "upload_ttl": "abc", "default_color": "nope"},
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["updated"] == {"canvas_max_width": 300}
    assert set(body["errors"]) == {"upload_ttl", "default_color"}
    assert config.SETTINGS.canvas_max_width == 300


def test_settings_patch_changes_default_color(client):
    response = client.patch("/settings", json={"default_color": "#000000", "default_color_name": "Night"})

    assert response.status_code == 200
    html = client.get("/").get_data(as_text=True)
    assert "To create Night:" in html
    assert "10 parts Black" in html


def test_upload_over_pixel_limit_is_rejected(client, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    api = client.post("/api/images", data=_upload(size=(40, 20)), content_type="multipart/form-data")
    form = client.post(
        "/upload",
        query_string={"color": "#228B22"},
        data=_upload(size=(40, 20)),
        content_type="multipart/form-data",
    )

    assert api.status_code == 400
    assert "error" in api.get_json()
    assert form.status_code == 302
    assert "image=" not in form.headers["Location"]


def test_oversized_form_upload_redirects_back(client):
    assert client.patch("/settings", json={"max_upload_bytes": 64}).status_code == 200

    response = client.post(
        "/upload",
        query_string={"color": "#228B22", "name": "Hedge"},
        data=_upload(),
        content_type="multipart/form-data",
    )

    assert response.status_code == 302
    location = response.headers["Location"]
    assert "color=%23228B22" in location
    assert "name=Hedge" in location
    assert "image=" not in location


def test_pick_at_right_edge_of_full_width_photo(client):
    photo = Image.new("RGB", (600, 200), color=(255, 255, 255))
    photo.paste((0, 0, 255), (590, 0, 600, 200))
    buffer = io.BytesIO()
    photo.save(buffer, "PNG")
    buffer.seek(0)
    location = client.post(
        "/upload",
        data={"image": (buffer, "wide.png")},
        content_type="multipart/form-data",
    ).headers["Location"]
    token = location.split("image=")[1].split("&")[0]

    page = client.get(location).get_data(as_text=True)
    assert '<div class="picker-frame"><input type="image"' in page

    picked = client.get("/pick", query_string={"image": token, "pt.x": 599, "pt.y": 100})
    assert "color=%230000FF" in picked.headers["Location"]


def test_color_form_keeps_open_photo(client):
    token = client.post("/api/images", data=_upload(), content_type="multipart/form-data").get_json()["token"]

    html = client.get("/", query_string={"image": token}).get_data(as_text=True)

    # once in the color form and once in the picker form
    assert html.count(f'name="image" value="{token}"') == 2


def test_preset_link_selects_preset(client):
    html = client.get("/").get_data(as_text=True)
    assert "preset=Forest+Green" in html

    page = client.get("/", query_string={"preset": "Forest Green"}).get_data(as_text=True)
    assert "To create Forest Green:" in page
    assert "8 parts Cyan + 8 parts Yellow + 2 parts Black" in page
