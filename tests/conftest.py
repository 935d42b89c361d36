"""
tests/conftest.py — Shared dataset fixtures

Small stand-ins for scene1.csv..scene3.csv, shaped like the published
time-use data (two years per activity).
"""

import pytest

SCENES = {
    "scene1.csv": """group,subgroup,value
Personal Care,2019,9.5
Personal Care,2022,9.62
Care for Non-Household Members,2019,0.8
Care for Non-Household Members,2022,0.5
Working,2019,7.65
Working,2022,7.6
""",
    "scene2.csv": """group,subgroup,value
Men,2019,8.07
Men,2022,8.03
Women,2019,7.5
Women,2022,7.73
""",
    "scene3.csv": """group,subgroup,value
Relaxing and Thinking,2019,0.3
Relaxing and Thinking,2022,0.54
Socializing/Communicating,2019,0.62
Socializing/Communicating,2022,0.49
""",
}


@pytest.fixture
def write_scenes():
    """Return a function that writes scene CSVs into a directory."""

    def _write(directory, names=tuple(SCENES)):
        for name in names:
            (directory / name).write_text(SCENES[name], encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def data_dir(tmp_path, write_scenes):
    data = tmp_path / "data"
    data.mkdir()
    return write_scenes(data)
