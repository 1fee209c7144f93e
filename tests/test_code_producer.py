from jcontainers.code_producer import (
    function_to_string,
    produce_amalgamated_code_to_file,
    produce_class_code,
    produce_class_to_file,
)
from jcontainers.reflection import ClassInfo, FunctionInfo, ObjectHandle


def nothing() -> None:
    pass


def count(state: object, obj: ObjectHandle) -> int:
    return 0


def set_value(state: object, obj: ObjectHandle, key: str, value: float) -> None:
    pass


def test_function_to_string_with_return_and_default_arg_name():
    info = FunctionInfo.from_function(count, "count", "*", stateless=False)
    assert function_to_string(info) == "Int function count(Int object) global native"


def test_function_to_string_void_and_named_args():
    info = FunctionInfo.from_function(set_value, "setFlt", "object key value", stateless=False)
    text = function_to_string(info)
    assert text.startswith("function setFlt(")
    assert "Int object, String key, Float value" in text
    assert text.endswith(") global native")


def test_fallback_argument_names():
    info = FunctionInfo.from_function(set_value, "setFlt", "* * *", stateless=False)
    text = function_to_string(info)
    assert "String arg1" in text
    assert "Float arg2" in text


def test_no_arguments():
    info = FunctionInfo.from_function(nothing)
    assert function_to_string(info).endswith("nothing() global native")


def test_produce_class_code_layout():
    cls = ClassInfo("JMap", extends_class="JValue", comment="line one\nline two")
    method = FunctionInfo.from_function(count, "count", "*", stateless=False)
    method.set_comment("counts items")
    cls.add_function(method)
    cls.add_text_block("; trailing text")

    code = produce_class_code(cls)
    assert code.startswith("\n;/  line one\n    line two\n/;\n")
    assert "ScriptName JMap extends JValue\n" in code
    assert "\n;/  counts items\n/;\n" + function_to_string(method) + "\n" in code
    assert code.endswith("; trailing text\n")


def test_produce_class_code_without_comment_or_base():
    code = produce_class_code(ClassInfo("Plain"))
    assert code == "ScriptName Plain\n"


def test_produce_class_to_file_round_trip(tmp_path):
    cls = ClassInfo("JArray")
    cls.add_function(FunctionInfo.from_function(count, "count", "*", stateless=False))
    path = produce_class_to_file(cls, tmp_path)
    assert path == tmp_path / "JArray.psc"
    assert path.read_text(encoding="utf-8") == produce_class_code(cls)


def test_produce_amalgamated_code_to_file(tmp_path):
    jmap = ClassInfo("JMap")
    jmap.add_function(FunctionInfo.from_function(nothing))
    jmap.add_function(FunctionInfo.from_function(count, "count", "*", stateless=False))
    jarray = ClassInfo("JArray")
    jarray.add_function(FunctionInfo.from_function(count, "count", "*", stateless=False))

    path = produce_amalgamated_code_to_file(
        {jmap.class_name: jmap, jarray.class_name: jarray}, tmp_path, "JContainers_DomainExample"
    )
    assert path == tmp_path / "JContainers_DomainExample.psc"
    text = path.read_text(encoding="utf-8")
    assert text.startswith("ScriptName JContainers_DomainExample\n")
    assert text.index("; JArray") < text.index("; JMap")
    assert "function JMap_count(" in text
    assert "function JArray_count(" in text
    assert "nothing" not in text
    assert jmap.methods[1].name == "count"