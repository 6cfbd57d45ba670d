"""Locate and load profile.json files from the input-parameters folder."""

import json
import os
from typing import List, Optional

from model.Profile import Profile

DEFAULT_BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))
PROFILE_FILE = 'profile.json'


def profiles_dir(base_path: Optional[str] = None) -> str:
    return os.path.join(base_path or DEFAULT_BASE_PATH, 'input-parameters')


def profile_path(name: str, base_path: Optional[str] = None) -> str:
    return os.path.join(profiles_dir(base_path), name, PROFILE_FILE)


def list_profiles(base_path: Optional[str] = None) -> List[str]:
    """Names of every folder under input-parameters holding a profile.json."""
    directory = profiles_dir(base_path)
    if not os.path.isdir(directory):
        return []
    return sorted(
        entry for entry in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, entry, PROFILE_FILE))
    )


def load_profile(name: str, base_path: Optional[str] = None) -> Profile:
    """Read and validate input-parameters/<name>/profile.json.

    Raises:
        FileNotFoundError: If the profile file does not exist.
        ValueError: If the file is not valid JSON or holds invalid settings.
    """
    path = profile_path(name, base_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Profile file not found: {path}")
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Profile {name!r} is not valid JSON: {e}")
    return Profile.from_dict(name, data)
