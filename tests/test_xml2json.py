import pytest

from flowcontrib.activity import ActivityContext, ActivityError
from flowcontrib.xml2json import Xml2JsonActivity, convert


def test_eval():
    act = Xml2JsonActivity()
    ctx = ActivityContext(
        inputs={"xmlData": '<?xml version="1.0" encoding="UTF-8"?><hello>world</hello>'}
    )
    assert act.eval(ctx) is True
    assert ctx.get_output("jsonObject")["hello"] == "world"


def test_eval_invalid_xml_raises():
    act = Xml2JsonActivity()
    ctx = ActivityContext(inputs={"xmlData": "<broken>"})
    with pytest.raises(ActivityError, match="Failed to convert XML data"):
        act.eval(ctx)


def test_eval_empty_input_raises():
    with pytest.raises(ActivityError):
        Xml2JsonActivity().eval(ActivityContext())


def test_attributes_and_content():
    assert convert('<a id="5" name="x">text</a>') == {
        "a": {"-id": 5.0, "-name": "x", "#content": "text"}
    }


def test_repeated_elements_become_list():
    assert convert("<r><i>1</i><i>2</i><i>3</i></r>") == {"r": {"i": [1.0, 2.0, 3.0]}}


def test_scalar_types():
    result = convert("<r><b>true</b><f>FALSE</f><n>null</n><s>hi</s><x>1.5</x></r>")
    assert result == {"r": {"b": True, "f": False, "n": None, "s": "hi", "x": 1.5}}


def test_nested_objects():
    result = convert("<order><item><name>pen</name><qty>2</qty></item></order>")
    assert result == {"order": {"item": {"name": "pen", "qty": 2.0}}}


def test_empty_element_is_empty_string():
    assert convert("<r><e/></r>") == {"r": {"e": ""}}


def test_text_is_trimmed():
    assert convert("<hello>\n   world  \n</hello>") == {"hello": "world"}


def test_namespace_prefix_dropped():
    assert convert('<a xmlns="urn:example"><b>c</b></a>') == {"a": {"b": "c"}}


def test_convert_invalid_raises_value_error():
    with pytest.raises(ValueError):
        convert("not xml")