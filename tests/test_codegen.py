from pathlib import Path

import pytest

from bicgen.codegen import (
    generate_dump,
    generate_gc,
    generate_tree_base,
    generate_tree_def,
    main_gendump,
    main_gengc,
    main_gentree,
    main_gentypes,
)
from bicgen.lang import parse_lang

LANG_TEXT = """
(defbasetypes (integer "mpz_t") (string "char *"))
(deftype CHAIN_HEAD "chain head")
(deftype T_INTEGER "integer" "tINT" (("VAL" integer)))
(deftype T_P "pointer" "tPTR" ("EXP"))
(deftype T_EMPTY "empty")
(deftype T_PAIR "pair" "tPAIR" ("LEFT" ("NAME" string)))
(defctype D_T_INT "int" "int" "d" "D_T_INT")
"""


@pytest.fixture
def lang():
    return parse_lang(LANG_TEXT)


def test_tree_def_lists_tree_types_only(lang):
    out = generate_tree_def(lang)
    assert out.startswith("/*\n * tree.def - Type definition for the `tree' structure.")
    assert 'DEFTYPE(T_INTEGER, "integer")\n' in out
    assert 'DEFTYPE(CHAIN_HEAD, "chain head")\n' in out
    assert "D_T_INT" not in out
    assert out.count("DEFTYPE(") == len(lang.tree_types)


def test_tree_def_preserves_order(lang):
    out = generate_tree_def(lang)
    assert out.index("T_INTEGER") < out.index("T_P,") < out.index("T_EMPTY")


def test_tree_base_declares_members(lang):
    out = generate_tree_base(lang)
    body = out[out.index("struct tree_data {\n"):]
    assert "    mpz_t integer0;\n" in body
    assert "    char * string0;\n" in body
    assert "    tree t0;\n" in body
    assert body.endswith("};\n")


def test_tree_base_shares_tree_slots(lang):
    out = generate_tree_base(lang)
    # T_P and T_PAIR each use one tree property, so one slot is shared.
    assert out.count("    tree t") == len(lang.tree_pool.members)
    assert "    tree t1;" not in out


def test_gc_marks_tree_properties(lang):
    out = generate_gc(lang)
    assert "void mark_object(gc_obj obj)" in out
    assert "        mark_tree(tPTR_EXP(t));\n" in out
    assert "        mark_tree(tPAIR_LEFT(t));\n" in out
    assert "tINT_VAL" not in out
    assert "tPAIR_NAME" not in out


def test_gc_chain_head_only_in_preamble(lang):
    out = generate_gc(lang)
    assert out.count("case CHAIN_HEAD:") == 1


def test_gc_propertyless_types_return(lang):
    out = generate_gc(lang)
    tail = out[out.index("/* These types have no properties to traverse */"):]
    assert "    case T_EMPTY:\n" in tail
    assert "    case D_T_INT:\n" in tail
    assert "        return;\n" in tail
    assert "case T_INTEGER" not in tail
    integer_case = out[out.index("    case T_INTEGER:\n"):]
    assert integer_case.startswith("    case T_INTEGER:\n        break;\n")


def test_dump_cases(lang):
    out = generate_dump(lang)
    assert out.startswith("/*\n * tree-dump.c - Define the tree_dump function.")
    assert "        tree_dump_integer(head, tINT_VAL(head));\n" in out
    assert "        __tree_dump(tPTR_EXP(head), depth + 1);\n" in out
    assert '        fprintf(stderr, "<tree D_T_INT");\n' in out
    assert out.endswith("    __tree_dump(head, 0);\n    fprintf(stderr, \"\\n\");\n}\n")


def test_dump_every_type_has_case(lang):
    out = generate_dump(lang)
    for tree_type in [*lang.tree_types, *lang.ctypes]:
        assert out.count(f"    case {tree_type.name}:\n") == 1
    assert out.count("        break;\n") == len(lang.tree_types) + len(lang.ctypes)


def test_dump_separates_second_property(lang):
    out = generate_dump(lang)
    pair = out[out.index("    case T_PAIR:\n"):out.index("    case D_T_INT:\n")]
    assert pair.count('fprintf(stderr, "     ");') == 1
    assert pair.index(" tPAIR_LEFT: ") < pair.index(" tPAIR_NAME: ")
    # a tree property was printed, so a closing newline precedes '>'
    assert pair.endswith(
        '        fprintf(stderr, "\\n");\n'
        "        tree_print_indent(depth);\n"
        '        fprintf(stderr, ">");\n'
        "        break;\n"
    )


def test_dump_no_trailing_indent_without_tree(lang):
    out = generate_dump(lang)
    integer = out[out.index("    case T_INTEGER:\n"):out.index("    case T_P:\n")]
    assert integer.count("tree_print_indent(depth);") == 1


@pytest.mark.parametrize(
    "main, output, generator",
    [
        (main_gentypes, "tree.def", generate_tree_def),
        (main_gentree, "tree-base.h", generate_tree_base),
        (main_gengc, "gc-internal.c", generate_gc),
        (main_gendump, "tree-dump.c", generate_dump),
    ],
)
def test_main_writes_output(tmp_path, monkeypatch, main, output, generator):
    desc = tmp_path / "lang.desc"
    desc.write_text(LANG_TEXT)
    monkeypatch.chdir(tmp_path)
    assert main([str(desc)]) == 0
    assert (tmp_path / output).read_text() == generator(parse_lang(LANG_TEXT))


@pytest.mark.parametrize("main", [main_gentypes, main_gentree, main_gengc, main_gendump])
def test_main_wrong_argument_count(main, capsys):
    assert main([]) == 1
    err = capsys.readouterr().err
    assert "expects exactly one argument" in err
    assert "Usage:" in err
    assert main(["a", "b"]) == 1


def test_main_missing_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main_gendump([str(tmp_path / "missing.desc")]) == 2
    assert "Could not open lang file" in capsys.readouterr().err
    assert not Path(tmp_path / "tree-dump.c").exists()


def test_main_parse_error(tmp_path, monkeypatch, capsys):
    desc = tmp_path / "bad.desc"
    desc.write_text("(bogus)")
    monkeypatch.chdir(tmp_path)
    assert main_gengc([str(desc)]) == 1
    assert "Unexpected toplevel construct" in capsys.readouterr().err
    assert not (tmp_path / "gc-internal.c").exists()