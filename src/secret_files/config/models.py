"""Configuration models for secret-files."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class FieldSource(BaseModel):
    """Where the value of an item field comes from.

    Attributes:
        env: Environment variable holding the value
        file: File holding the value (``~`` is expanded)
    """

    env: Optional[str] = None
    file: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_source(self) -> "FieldSource":
        """Validate that exactly one of env/file is set."""
        if (self.env is None) == (self.file is None):
            raise ValueError("Field source must set exactly one of 'env' or 'file'")
        return self


class FileSpec(BaseModel):
    """A secret file to provision before running the command.

    Attributes:
        name: Friendly name, used in listings and logs
        field: Name of the item field whose value becomes the file contents
        fixed_path: Store the file at this exact path
        filename: Store the file under this name in the temp dir
        path_env_var: Export the file path under this variable
        dir_env_var: Export the file's directory under this variable
        args: Arg templates appended to the command; "{{ .Path }}" is the file path
    """

    name: str
    field: str
    fixed_path: Optional[str] = None
    filename: Optional[str] = None
    path_env_var: Optional[str] = None
    dir_env_var: Optional[str] = None
    args: Optional[List[str]] = None


class SecretFilesConfig(BaseModel):
    """Root configuration model.

    Attributes:
        fields: Item fields by name and where to read them from
        files: Secret files to provision, in order
    """

    fields: Dict[str, FieldSource] = Field(default_factory=dict)
    files: List[FileSpec] = Field(default_factory=list)
