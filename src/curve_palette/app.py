from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, jsonify, request

from . import config
from .palette import ColorPalette

log = logging.getLogger(__name__)

FORMATS = {"hex", "rgb", "hsl"}


def parse_count(val: Any, default: int = config.PALETTE_STOPS) -> int:
    n = default if val is None else int(val)
    return max(1, min(n, config.MAX_SAMPLES))


def parse_format(val: Any) -> str:
    f = str(val or "hex").strip().lower()
    return f if f in FORMATS else "hex"


def parse_precision(val: Any, default: int = config.EXPORT_PRECISION) -> int:
    p = default if val is None else int(val)
    if p < 0:
        raise ValueError(f"precision must be non-negative, got {p}")
    return p


def _mapping(body: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = body.get(key)
    if value is None or isinstance(value, Mapping):
        return value
    if isinstance(value, str):
        # a bare curve type, e.g. {"hs": "elastic"}
        return {"type": value}
    raise ValueError(f"'{key}' must be an object or a curve type")


def _body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, Mapping) else {}


def build_palette(body: Mapping[str, Any]) -> ColorPalette:
    return ColorPalette.from_params(
        _mapping(body, "hs"), _mapping(body, "l"), _mapping(body, "palette")
    )


def sample_palette(palette: ColorPalette, n: int, fmt: str) -> list[str]:
    """`n` colours spread over the palette, endpoints included when n > 1."""
    palette.update_curve_clamp_bounds()
    sample = {
        "hex": palette.hex_value_at,
        "rgb": palette.rgb_value_at,
        "hsl": palette.hsl_value_at,
    }[fmt]
    if n == 1:
        return [sample(0.5)]
    return [sample(i / (n - 1)) for i in range(n)]


# ----------------------------- Flask app ----------------------------------


def create_app() -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    @app.route("/palette", methods=["POST"])
    def palette():
        body = _body()
        try:
            n = parse_count(body.get("n"))
            pal = build_palette(body)
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"invalid palette request: {e}"}), 400

        fmt = parse_format(body.get("format"))
        try:
            colors = sample_palette(pal, n, fmt)
        except Exception as exc:
            log.exception("Palette sampling failed")
            return jsonify({"error": str(exc)}), 500

        return jsonify(colors)

    @app.route("/export", methods=["POST"])
    def export():
        body = _body()
        try:
            pal = build_palette(body)
            precision = parse_precision(body.get("precision"))
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"invalid palette request: {e}"}), 400

        return jsonify({"params": pal.export_palette_params(precision)})

    return app


def main() -> None:
    create_app().run(debug=False, threaded=True)


if __name__ == "__main__":
    main()
