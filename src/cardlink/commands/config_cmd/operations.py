"""Config operations (initialization)."""

import shutil

from cardlink.lib.output import info, success, warning
from cardlink.lib.paths import get_config_dir, get_config_file, get_template_file


def initialize_config(force: bool = False) -> int:
    """Create config.yaml in the config directory from the bundled template.

    Parameters
    ----------
    force : bool
        Overwrite an existing config.yaml

    Returns
    -------
    int
        Exit code
    """
    config_dir = get_config_dir()
    config_file = get_config_file()

    info(f"Initializing config directory: {config_dir}")
    config_dir.mkdir(parents=True, exist_ok=True)

    if config_file.exists() and not force:
        warning(f"Skipping {config_file.name} (already exists, use --force to overwrite)")
        return 0

    shutil.copy(get_template_file(), config_file)
    success(f"Created {config_file}")
    info("Override any key with CARDLINK_<SECTION>_<KEY> environment variables")
    return 0
