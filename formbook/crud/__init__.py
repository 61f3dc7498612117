from pydantic import BaseModel


def json_value(value):
    """Converts pydantic values into what a JSON column stores (camelCase keys)."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: json_value(item) for key, item in value.items()}
    return value


from . import crud_booking, crud_event, crud_form, crud_response  # noqa: E402,F401
