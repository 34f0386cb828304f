import pytest


@pytest.fixture
def csv_lines():
    """midicsv rows for a two-track file at 480 ticks per quarter note."""
    return [
        "0, 0, Header, 1, 2, 480\n",
        "1, 0, Start_track\n",
        "1, 0, Title_t, \"Test song\"\n",
        "1, 0, Tempo, 500000\n",
        "1, 960, Tempo, 250000\n",
        "1, 960, End_track\n",
        "2, 0, Start_track\n",
        "2, 0, Note_on_c, 0, 60, 100\n",
        "2, 480, Note_off_c, 0, 60, 0\n",
        "2, 480, Note_on_c, 0, 64, 90\n",
        "2, 960, Note_on_c, 0, 64, 0\n",
        "2, 1440, Note_on_c, 0, 67, 80\n",
        "2, 1920, End_track\n",
        "0, 0, End_of_file\n",
    ]
