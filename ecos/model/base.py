import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    """Models dump under their aliases unless told otherwise.

    Aliases are the camelCase names used in stored documents and in reports;
    Python code constructs and reads models by field name.
    """

    model_config = p.ConfigDict(populate_by_name=True)

    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:
        return super().model_dump(by_alias=by_alias, **kwargs)

    def model_dump_json(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> str:
        return super().model_dump_json(by_alias=by_alias, **kwargs)
