from importlib import metadata
from pathlib import Path

here = Path(__file__).parent
version_file = here.parent / "VERSION.txt"
if version_file.exists():
    with open(version_file, "r") as vf:
        __version__ = vf.read().strip()
else:
    # installed from a wheel, VERSION.txt is not shipped
    __version__ = metadata.version("ecos-evaluation")
