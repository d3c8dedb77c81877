from __future__ import annotations

from dataclasses import asdict, fields
from html import escape
from pathlib import Path
from string import Template
from urllib.parse import urlencode

from flask import Flask, jsonify, redirect, request
from PIL import Image
from werkzeug.exceptions import RequestEntityTooLarge

from .config import PIGMENTS, PRESET_COLORS, SETTINGS, configure_logging
from .infrastructure.sampling import ImageDecodeError, fit_to_canvas, load_image, sample_pixel
from .infrastructure.store import STORE
from .mixing.colors import hex_to_rgb, validate_rgb
from .mixing.instructions import breakdown, mixing_instructions, ratio_strip
from .responses import error_response, preset_payload, recipe_payload, send_png
from .session import MixerSession

APP_VERSION = "1.0.0"

TEMPLATE_PATH = Path(__file__).parent / "templates" / "index.html"


def _read_upload() -> Image.Image:
    upload = request.files.get("image")
    if upload is None:
        raise ImageDecodeError("No image uploaded")
    if upload.mimetype and not upload.mimetype.startswith("image/"):
        raise ImageDecodeError(f"Not an image upload: {upload.mimetype}")
    return fit_to_canvas(load_image(upload.read()))


def _page_url(**params: str) -> str:
    return "/?" + urlencode(params)


def create_app() -> Flask:
    logger = configure_logging()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_bytes

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(exc):
        logger.warning("Rejected upload larger than %s bytes", SETTINGS.max_upload_bytes)
        if request.endpoint == "upload":
            return redirect(_page_url(**MixerSession.from_args(request.args).query()))
        return error_response("Upload too large", 413)

    @app.route("/api/recipe")
    def api_recipe():
        color = request.args.get("color")
        if color is not None:
            rgb = hex_to_rgb(color)
            if rgb is None:
                return error_response(f"Malformed hex color: {color!r}")
        else:
            try:
                rgb = validate_rgb(request.args.get(channel) for channel in "rgb")
            except ValueError as exc:
                return error_response(str(exc))
        logger.debug("Recipe for %s", rgb)
        return jsonify(recipe_payload(rgb))

    @app.route("/api/presets")
    def api_presets():
        return jsonify(presets=[preset_payload(preset) for preset in PRESET_COLORS])

    @app.route("/api/images", methods=["POST"])
    def api_upload():
        try:
            img = _read_upload()
        except ImageDecodeError as exc:
            logger.warning("Upload rejected: %s", exc)
            return error_response(str(exc))
        token = STORE.put(img)
        logger.info("Stored %sx%s upload as %s", img.width, img.height, token)
        return jsonify(token=token, width=img.width, height=img.height), 201

    @app.route("/api/images/<token>/pixel")
    def api_pixel(token: str):
        img = STORE.get(token)
        if img is None:
            return error_response(f"Unknown image: {token}", 404)
        try:
            x = float(request.args["x"])
            y = float(request.args["y"])
            display_size = None
            if "display_width" in request.args or "display_height" in request.args:
                display_size = (
                    float(request.args["display_width"]),
                    float(request.args["display_height"]),
                )
            rgb = sample_pixel(img, x, y, display_size)
        except KeyError as exc:
            return error_response(f"Missing parameter: {exc.args[0]}")
        except ValueError as exc:
            return error_response(str(exc))
        logger.info("Picked %s from %s at (%s, %s)", rgb, token, x, y)
        return jsonify(recipe_payload(rgb))

    @app.route("/image/<token>")
    def image(token: str):
        img = STORE.get(token)
        if img is None:
            return ("Image expired or unknown", 404)
        return send_png(img)

    @app.route("/upload", methods=["POST"])
    def upload():
        session = MixerSession.from_args(request.args)
        try:
            img = _read_upload()
        except ImageDecodeError as exc:
            logger.warning("Upload rejected: %s", exc)
            return redirect(_page_url(**session.query()))
        session.attach_image(STORE.put(img))
        logger.info("Stored %sx%s upload as %s", img.width, img.height, session.image_token)
        return redirect(_page_url(**session.query()))

    @app.route("/pick")
    def pick():
        session = MixerSession.from_args(request.args)
        img = STORE.get(session.image_token) if session.image_token else None
        if img is None:
            session.close_image()
            return redirect(_page_url(**session.query()))
        try:
            rgb = sample_pixel(
                img,
                float(request.args.get("pt.x", "")),
                float(request.args.get("pt.y", "")),
            )
        except ValueError as exc:
            logger.warning("Pick ignored: %s", exc)
            return redirect(_page_url(**session.query()))
        session.pick_rgb(rgb)
        logger.info("Picked %s from %s", session.selected_color, session.image_token)
        return redirect(_page_url(**session.query()))

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, uploads=len(STORE))

    @app.route("/settings", methods=["GET", "PATCH"])
    def settings_view():
        if request.method == "GET":
            return jsonify(asdict(SETTINGS))

        payload = request.get_json(silent=True) or {}
        errors: dict[str, str] = {}
        applied: dict[str, object] = {}

        for field in fields(SETTINGS):
            if field.name not in payload:
                continue

            raw_value = payload[field.name]
            try:
                if field.type is int:
                    coerced = int(raw_value)
                elif field.type is float:
                    coerced = float(raw_value)
                else:
                    coerced = str(raw_value)
            except (TypeError, ValueError):
                errors[field.name] = f"Expected {field.type.__name__}"
                continue

            if field.name == "default_color" and hex_to_rgb(coerced) is None:
                errors[field.name] = "Expected 6-digit hex color"
                continue

            setattr(SETTINGS, field.name, coerced)
            applied[field.name] = coerced

        if "max_upload_bytes" in applied:
            app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_bytes

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, settings=asdict(SETTINGS)),
            status,
        )

    @app.route("/")
    def index():
        session = MixerSession.from_args(request.args)
        if session.image_token and STORE.get(session.image_token) is None:
            session.close_image()
        recipe = session.paint_parts
        name = escape(session.color_name)

        preset_cards = "".join(
            f'<a class="preset" href="{escape(_page_url(**session.query(preset=preset.name)))}" '
            f'title="{escape(preset.description)}">'
            f'<span class="preset-swatch" style="background:{preset.hex}"></span>'
            f'<span class="preset-name">{escape(preset.name)}</span>'
            f"</a>"
            for preset in PRESET_COLORS
        )

        ratio_html = ""
        strip = ratio_strip(recipe)
        if strip:
            blobs = "".join(
                f'<span class="blob" style="background:{p.swatch};color:{p.text_color}" '
                f'title="{p.label}">{p.letter}</span>'
                for p in strip
            )
            ratio_html = (
                f'<p class="ratio-label">Visual Ratio:</p>'
                f'<div class="ratio">{blobs}</div>'
            )

        breakdown_rows = []
        for row in breakdown(recipe):
            dots = "".join(
                f'<span class="dot{"" if filled else " dim"}"></span>'
                for filled in row["indicators"]
            )
            breakdown_rows.append(
                f'<div class="part" style="background:{row["swatch"]};color:{row["text_color"]}">'
                f'<div class="part-head"><span class="part-name">{row["label"]}</span>'
                f'<span class="part-value">{row["value"]}</span></div>'
                f'<p class="part-paint">{escape(str(row["paint"]))}</p>'
                f'<div class="dots">{dots}</div>'
                f"</div>"
            )

        if session.picking and session.image_token:
            close_query = MixerSession(session.selected_color, session.color_name).query()
            image_html = (
                f'<form action="/pick" method="get" class="picker">'
                f'<input type="hidden" name="color" value="{escape(session.selected_color)}">'
                f'<input type="hidden" name="name" value="{name}">'
                f'<input type="hidden" name="image" value="{escape(session.image_token)}">'
                f'<div class="picker-frame">'
                f'<input type="image" name="pt" src="/image/{escape(session.image_token)}" alt="Uploaded photo">'
                f"</div>"
                f"</form>"
                f'<p class="hint">Click anywhere on the image to pick a color</p>'
                f'<a class="btn" href="{escape(_page_url(**close_query))}">Close Photo</a>'
            )
        else:
            image_html = (
                f'<form action="{escape("/upload?" + urlencode(session.query()))}" method="post" '
                f'enctype="multipart/form-data" class="upload">'
                f'<input type="file" name="image" accept="image/*">'
                f'<button type="submit" class="btn">Upload Photo</button>'
                f"</form>"
            )

        image_field = ""
        if session.picking and session.image_token:
            image_field = f'<input type="hidden" name="image" value="{escape(session.image_token)}">'

        legend = ", ".join(p.paint for p in PIGMENTS)
        with open(TEMPLATE_PATH, "r", encoding="utf-8") as f:
            tmpl_str = f.read()

        return Template(tmpl_str).substitute(
            APP_VERSION=APP_VERSION,
            selected_color=escape(session.selected_color),
            color_name=name,
            image_html=image_html,
            image_field=image_field,
            preset_cards=preset_cards,
            instructions=escape(mixing_instructions(recipe)),
            ratio_html=ratio_html,
            breakdown_html="".join(breakdown_rows),
            pigment_legend=escape(legend),
        )

    return app


# Module-level application for WSGI servers (``paint_mixer.app:app``).
app = create_app()
application = app
