import re

import pytest

from sochain.activity_log import log_command

LINE = re.compile(r"^\d{8} \d{2}:\d{2}:\d{2}\.\d{3} (.*)$")


def test_appends_one_line_per_command(tmp_path):
    path = tmp_path / "log.txt"
    log_command(path, "bal 3")
    log_command(path, "end")
    lines = path.read_text().splitlines()
    assert [LINE.match(line).group(1) for line in lines] == ["bal 3", "end"]


def test_keeps_existing_content(tmp_path):
    path = tmp_path / "log.txt"
    path.write_text("earlier\n")
    log_command(path, "help")
    lines = path.read_text().splitlines()
    assert lines[0] == "earlier"
    assert LINE.match(lines[1]).group(1) == "help"


def test_unwritable_location_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        log_command(tmp_path / "missing" / "log.txt", "stat")