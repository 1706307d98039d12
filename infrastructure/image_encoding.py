"""Payment proof encoding: uploaded bytes become a data URI stored on the booking"""
import base64


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
