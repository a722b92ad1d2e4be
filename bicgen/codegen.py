"""Generators for the C sources derived from a language description.

Each ``generate_*`` function returns the full text of one generated file.
The ``main_*`` functions are the command entry points: they read a
description file named on the command line and write the generated file
into the current directory.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Sequence

from bicgen.lang import LangParseError, Language, TreeType, read_lang


def _banner(file_name: str, purpose: str, generator: str) -> str:
    return (
        "/*\n"
        f" * {file_name} - {purpose}\n"
        " *\n"
        f" * Automatically generated by {generator}. DO NOT EDIT.\n"
        " */\n\n"
    )


def generate_tree_def(lang: Language) -> str:
    """Return the text of ``tree.def``: one DEFTYPE line per tree type."""
    lines = [
        f'DEFTYPE({tree_type.name}, "{tree_type.friendly_name}")\n'
        for tree_type in lang.tree_types
    ]
    return (
        _banner("tree.def", "Type definition for the `tree' structure.", "gendef")
        + "".join(lines)
    )


def generate_tree_base(lang: Language) -> str:
    """Return the text of ``tree-base.h``: the ``tree_data`` member struct."""
    body = "".join(pool.emit_declarations() for pool in lang.base_type_pools.values())
    body += lang.tree_pool.emit_declarations()
    return (
        _banner(
            "tree-base.h",
            "Base structures and definition of the tree type.",
            "gentree",
        )
        + "struct tree_data {\n"
        + body
        + "};\n"
    )


_GC_PREAMBLE = """\

#include "gc-internal.h"

void mark_object(gc_obj obj)
{
    tree t;

    if (!obj)
        return;

    obj->reachable = 1;

    t = &obj->t;

    mark_tree(tLOCUS(t).file);

    switch (TYPE(t)) {
    case CHAIN_HEAD:
    {
        tree i;
        for_each_tree(i, t)
            mark_tree(i);
    }
    break;
"""

_GC_EPILOGUE = """\
    }
}
"""


def generate_gc(lang: Language) -> str:
    """Return the text of ``gc-internal.c``, defining ``mark_object``."""
    parts = [
        _banner("gc-internal.c", "Define the mark_object function.", "gengc"),
        _GC_PREAMBLE,
    ]
    propertyless: list[str] = []

    for tree_type in [*lang.tree_types, *lang.ctypes]:
        if tree_type.name == "CHAIN_HEAD":
            continue
        if not tree_type.props:
            propertyless.append(tree_type.name)
            continue
        parts.append(f"    case {tree_type.name}:\n")
        parts.extend(
            f"        mark_tree({prop}(t));\n"
            for prop, member in tree_type.props.items()
            if member.base_type.is_tree
        )
        parts.append("        break;\n")

    parts.append("    /* These types have no properties to traverse */\n")
    parts.extend(f"    case {name}:\n" for name in propertyless)
    parts.append("        return;\n")
    parts.append(_GC_EPILOGUE)
    return "".join(parts)


_DUMP_PREAMBLE = """\
#include "tree-dump.h"
#include "tree-dump-primitives.h"

static void __tree_dump(tree t, int depth);

static void tree_print_indent(int depth)
{
    int i;
    for (i = 0; i < depth *2; i++)
        fprintf(stderr, " ");
}

static void __tree_dump_1(tree head, int depth)
{
    switch(TYPE(head)) {
"""

_DUMP_EPILOGUE = """\
    }
}

static void __tree_dump(tree head, int depth)
{
    tree i;

    if (!head) {
        tree_print_indent(depth);
        fprintf(stderr, "<null>\\n");
        return;
    }

    if (is_CHAIN_HEAD(head)) {
        fprintf(stderr, "\\n");
        tree_print_indent(depth);
        fprintf(stderr, "<chain");

        for_each_tree(i, head)
            __tree_dump_1(i, depth+1);

        fprintf(stderr, "\\n");
        tree_print_indent(depth);
        fprintf(stderr, ">");
    }
    else
        __tree_dump_1(head, depth);
}

void tree_dump(tree head)
{
    __tree_dump(head, 0);
    fprintf(stderr, "\\n");
}
"""

_NEWLINE_AND_INDENT = (
    '        fprintf(stderr, "\\n");\n'
    "        tree_print_indent(depth);\n"
)


def _dump_case(tree_type: TreeType) -> str:
    parts = [
        f"    case {tree_type.name}:\n",
        _NEWLINE_AND_INDENT,
        f'        fprintf(stderr, "<tree {tree_type.name}");\n',
    ]
    printed_tree = False

    for index, (prop, member) in enumerate(tree_type.props.items()):
        if index:
            parts.append(_NEWLINE_AND_INDENT)
            parts.append('        fprintf(stderr, "     ");\n')
        parts.append(f'        fprintf(stderr, " {prop}: ");\n')
        if member.base_type.is_tree:
            printed_tree = True
            parts.append(f"        __tree_dump({prop}(head), depth + 1);\n")
        else:
            parts.append(
                f"        tree_dump_{member.base_type.name}(head, {prop}(head));\n"
            )

    if printed_tree:
        parts.append(_NEWLINE_AND_INDENT)
    parts.append('        fprintf(stderr, ">");\n')
    parts.append("        break;\n")
    return "".join(parts)


def generate_dump(lang: Language) -> str:
    """Return the text of ``tree-dump.c``, defining ``tree_dump``."""
    cases = "".join(_dump_case(t) for t in [*lang.tree_types, *lang.ctypes])
    return (
        _banner("tree-dump.c", "Define the tree_dump function.", "gendump")
        + _DUMP_PREAMBLE
        + cases
        + _DUMP_EPILOGUE
    )


def _usage(prog: str, target: str) -> None:
    err = sys.stderr
    print(f"{prog} - Generate the `{target}' file from a language description", file=err)
    print(f"Usage: {prog} LANG_DESC_FILE", file=err)
    print("", file=err)
    print("Where LANG_DESC_FILE is a language description file.", file=err)


def _run(
    argv: Sequence[str] | None,
    prog: str,
    usage_target: str,
    output_name: str,
    generator: Callable[[Language], str],
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(f"Error: {prog} expects exactly one argument", file=sys.stderr)
        _usage(prog, usage_target)
        return 1

    try:
        lang = read_lang(args[0])
    except OSError as exc:
        print(f"Could not open lang file: {exc.strerror or exc}", file=sys.stderr)
        _usage(prog, usage_target)
        return 2
    except LangParseError as exc:
        print(exc, file=sys.stderr)
        return 1

    Path(output_name).write_text(generator(lang))
    return 0


def main_gentypes(argv: Sequence[str] | None = None) -> int:
    """Write ``tree.def`` from the description named in ``argv``."""
    return _run(argv, "gentypes", "tree.def", "tree.def", generate_tree_def)


def main_gentree(argv: Sequence[str] | None = None) -> int:
    """Write ``tree-base.h`` from the description named in ``argv``."""
    return _run(argv, "gentree", "tree-base.h", "tree-base.h", generate_tree_base)


def main_gengc(argv: Sequence[str] | None = None) -> int:
    """Write ``gc-internal.c`` from the description named in ``argv``."""
    return _run(argv, "gengc", "tree-access.h", "gc-internal.c", generate_gc)


def main_gendump(argv: Sequence[str] | None = None) -> int:
    """Write ``tree-dump.c`` from the description named in ``argv``."""
    return _run(argv, "gendump", "tree-access.h", "tree-dump.c", generate_dump)