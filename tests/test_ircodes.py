from __future__ import annotations

import threading

from braviactl.core.ircodes import IRCommandTable, looks_like_code

from fakes import MUTE_CODE, REMOTE_INFO, SLEEP_CODE, WAKEUP_CODE


def _table() -> IRCommandTable:
    table = IRCommandTable()
    table.replace(REMOTE_INFO["result"][1])
    return table


def test_lookup_is_case_insensitive() -> None:
    table = _table()
    assert table.resolve("MUTE") == MUTE_CODE
    assert table.resolve("mute") == table.resolve("Mute")


def test_duplicate_codes_keep_both_names() -> None:
    table = _table()
    assert len(table) == 4
    assert table.resolve("Sleep") == SLEEP_CODE
    assert table.resolve("PowerOff") == SLEEP_CODE


def test_code_input_reverse_resolves() -> None:
    table = _table()
    assert table.lookup(WAKEUP_CODE) == ("wakeup", WAKEUP_CODE)
    assert table.resolve(WAKEUP_CODE) == WAKEUP_CODE
    assert table.name_for(MUTE_CODE) == "mute"


def test_codes_are_case_sensitive() -> None:
    table = _table()
    assert looks_like_code(MUTE_CODE)
    assert not looks_like_code(MUTE_CODE.lower())
    assert table.resolve(MUTE_CODE.lower()) is None


def test_unknown_code_or_name_is_none() -> None:
    table = _table()
    assert table.resolve("AAAAAQAAAAEAAAAZAw==") is None
    assert table.resolve("Netflix") is None
    assert table.resolve("") is None


def test_replace_is_wholesale() -> None:
    table = _table()
    count = table.replace([{"name": "Home", "value": "AAAAAQAAAAEAAABgAw=="}])
    assert count == 1
    assert table.resolve("mute") is None
    assert table.items() == [("home", "AAAAAQAAAAEAAABgAw==")]


def test_malformed_entries_are_skipped() -> None:
    table = IRCommandTable()
    assert table.replace([{"name": "Mute"}, {"value": MUTE_CODE}, {"name": "Mute", "value": MUTE_CODE}]) == 1


def test_readers_never_see_a_partly_replaced_table() -> None:
    names = [f"button{i}" for i in range(50)]
    first = [{"name": name, "value": f"AAAAAQAAAAEAAA{i:02d}Aw=="} for i, name in enumerate(names)]
    second = [{"name": name, "value": f"AAAAAgAAAAEAAA{i:02d}Aw=="} for i, name in enumerate(names)]
    first_items = sorted((e["name"], e["value"]) for e in first)
    second_items = sorted((e["name"], e["value"]) for e in second)

    table = IRCommandTable()
    table.replace(first)
    stop = threading.Event()
    mixed: list[list[tuple[str, str]]] = []
    unknown: list[str | None] = []

    def swap() -> None:
        for round_no in range(500):
            table.replace(second if round_no % 2 == 0 else first)
        stop.set()

    def read() -> None:
        while not stop.is_set():
            items = table.items()
            if items not in (first_items, second_items):
                mixed.append(items)
            code = table.resolve("button7")
            if code not in ("AAAAAQAAAAEAAA07Aw==", "AAAAAgAAAAEAAA07Aw=="):
                unknown.append(code)

    readers = [threading.Thread(target=read) for _ in range(4)]
    writer = threading.Thread(target=swap)
    for thread in readers:
        thread.start()
    writer.start()
    writer.join(10.0)
    stop.set()
    for thread in readers:
        thread.join(10.0)

    assert mixed == []
    assert unknown == []
