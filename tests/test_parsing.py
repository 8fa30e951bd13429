from nofake.services.parsing import as_int, as_text_list, parse_json_object, strip_code_fences


def test_strip_code_fences_removes_markdown_wrapper():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_parse_fenced_json():
    result = parse_json_object('```json\n{"credibilityScore": 80}\n```')
    assert result.ok
    assert result.data == {"credibilityScore": 80}


def test_parse_json_surrounded_by_prose():
    result = parse_json_object('Claro, aquí tienes: {"a": {"b": 2}} Espero que ayude.')
    assert result.ok
    assert result.data == {"a": {"b": 2}}


def test_parse_reports_failures_without_raising():
    assert not parse_json_object(None).ok
    assert not parse_json_object("   ").ok
    assert parse_json_object("lo siento, no puedo ayudar").error == "no JSON object found"
    assert parse_json_object("{not json}").error.startswith("invalid JSON")
    assert not parse_json_object("[1, 2, 3]").ok


def test_as_int_coercions():
    assert as_int(True) is None
    assert as_int(7) == 7
    assert as_int(3.6) == 4
    assert as_int(" 12 ") == 12
    assert as_int("abc") is None
    assert as_int(float("nan")) is None
    assert as_int(None) is None


def test_as_text_list_filters_non_strings():
    assert as_text_list(["a", 1, " ", "b "]) == ["a", "b"]
    assert as_text_list([1, 2]) is None
    assert as_text_list("a") is None
