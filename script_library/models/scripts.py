"""Script input models.

Contract:
- Inputs: Source text, encoding, working directory, profile name
- Outputs: Immutable request values owned by the caller
- Side Effects: None (pure data structures)
"""

import codecs
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ScriptSource:
    """Source text of a script.

    Attributes:
        text: Python source text
        encoding: Character encoding of the originating file
        file_path: Path the text was read from, if any

    Example:
        >>> source = ScriptSource("1 + 1")
        >>> str(source)
        '1 + 1'
    """

    text: str
    encoding: str = "utf-8"
    file_path: str | None = None

    def __post_init__(self: "ScriptSource") -> None:
        # Normalise aliases ("UTF8", "latin1") so equal encodings compare equal
        object.__setattr__(self, "encoding", codecs.lookup(self.encoding).name)

    @classmethod
    def from_file(cls, path: Path | str, encoding: str = "utf-8") -> "ScriptSource":
        """Read a script file.

        Args:
            path: Script file path
            encoding: Encoding used to decode the file

        Returns:
            ScriptSource carrying the file's absolute path
        """
        path = Path(path).resolve()
        return cls(text=path.read_text(encoding=encoding), encoding=encoding, file_path=str(path))

    def __str__(self: "ScriptSource") -> str:
        return self.text


@dataclass(frozen=True)
class ScriptContext:
    """A single compilation request.

    Attributes:
        source: Script source
        working_directory: Directory holding the dependency manifest
        configuration: Manifest profile name (e.g. "Debug", "Release")
        debug_mode: Emit debug information
        file_path: Originating file path (falls back to ``source.file_path``)

    Example:
        >>> context = ScriptContext(ScriptSource("1 + 1"), working_directory=Path("."))
        >>> context.configuration
        'Debug'
    """

    source: ScriptSource
    working_directory: Path
    configuration: str = "Debug"
    debug_mode: bool = False
    file_path: str | None = None

    def __post_init__(self: "ScriptContext") -> None:
        object.__setattr__(self, "working_directory", Path(self.working_directory))
        if self.file_path is None and self.source.file_path is not None:
            object.__setattr__(self, "file_path", self.source.file_path)
