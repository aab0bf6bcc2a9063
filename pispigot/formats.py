import gzip
import json
from typing import Dict, Tuple


FORMATS = ("txt", "json", "csv", "tsv", "ndjson")
COMPRESSIONS = ("none", "gzip")


def _json_line(value: str, meta: Dict) -> str:
    payload = dict(meta)
    payload["value"] = value
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def serialize_payload(value: str, fmt: str, meta: Dict) -> Tuple[bytes, str]:
    fmt = fmt.lower().strip()
    if fmt == "txt":
        return value.encode("utf-8"), "text/plain"
    if fmt == "json":
        return _json_line(value, meta).encode("utf-8"), "application/json"
    if fmt == "ndjson":
        return (_json_line(value, meta) + "\n").encode("utf-8"), "application/x-ndjson"
    if fmt in {"csv", "tsv"}:
        sep = "," if fmt == "csv" else "\t"
        header = ["digits", "elapsed_ms", "value"]
        row = [str(meta.get("digits")), str(meta.get("elapsed_ms", "")), value]
        out = sep.join(header) + "\n" + sep.join(row) + "\n"
        mime = "text/csv" if fmt == "csv" else "text/tab-separated-values"
        return out.encode("utf-8"), mime
    raise ValueError(f"unsupported format: {fmt}")


def apply_compression(payload: bytes, compression: str) -> Tuple[bytes, str]:
    compression = (compression or "none").lower().strip()
    if compression == "none":
        return payload, ""
    if compression in {"gzip", "gz"}:
        return gzip.compress(payload), ".gz"
    raise ValueError("unsupported compression")


def final_filename(stem: str, fmt: str, compression_suffix: str = "") -> str:
    if stem.lower().endswith("." + fmt):
        stem = stem[: -(len(fmt) + 1)]
    return f"{stem}.{fmt}{compression_suffix}"
