# bicgen

`bicgen` reads a *language description file*, which describes the node
types of a syntax tree for a C interpreter, and generates the C sources
that describe, lay out, garbage-collect and dump those nodes. Alongside
the generators it provides a few supporting pieces that work on the same
model: a Python tree type with chaining, a typename registry, a string
hash and hash table, a C preprocessor runner, and helpers for completing
identifiers and member accesses.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## The language description

A description file is a sequence of parenthesised top-level forms.
Comments run from `;` to the end of the line, and the keywords are
matched without regard to case.

```
(defbasetypes (integer "mpz_t") (string "char *"))
(deftype T_INTEGER "integer" "tINT" (("VAL" integer)))
(deftype T_PTR "pointer" "tPTR" ("EXP"))
(defctype D_T_INT "int" "int" "d" "D_T_INT")
```

- `defbasetypes` declares the primitive data types that properties may
  hold: a short name followed by the C type used to store it.
- `deftype` declares a node type: its enum name, a friendly description
  and, optionally, a property prefix and a list of properties. A bare
  string property holds a child tree; a parenthesised
  `("NAME" basetype)` property holds a value of that base type. Property
  names are the prefix, an underscore and the name, e.g. `tINT_VAL`.
- `defctype` declares a node for a C data type. After the name and
  description come the C type, a printf format string and a union member
  name, followed by the same optional property list as `deftype`.

Storage is shared between node types. Each base type has a pool of
union members named after it (`integer0`, `integer1`, ...) and child
trees draw from a pool named `t` (`t0`, `t1`, ...). Each node type takes
the existing members of a pool first and only adds new ones when it
needs more, so the union is as wide as the widest node type.

Errors raise `LangParseError`, whose message gives the line and column of
the offending token, e.g. `3:14: Parse error in deftype: Expected STRING`.
Naming a base type that was never declared is also an error.

## Commands

Each command takes exactly one argument, the description file, and
writes its output into the current directory.

| Command            | Writes          | Contents                                      |
|--------------------|-----------------|-----------------------------------------------|
| `bicgen-gentypes`  | `tree.def`      | one `DEFTYPE(NAME, "description")` per `deftype` |
| `bicgen-gentree`   | `tree-base.h`   | the `struct tree_data` member layout          |
| `bicgen-gengc`     | `gc-internal.c` | the `mark_object` traversal for the collector |
| `bicgen-gendump`   | `tree-dump.c`   | the `tree_dump` debugging printer             |

```
bicgen-gentypes lang.desc
bicgen-gentree lang.desc
bicgen-gengc lang.desc
bicgen-gendump lang.desc
```

A wrong number of arguments exits with status 1 and prints a usage
message; a description file that cannot be opened exits with status 2,
also with the usage message. A parse error prints its message and exits
with status 1. On success the command exits with status 0.

## Library use

```python
from bicgen.lang import read_lang
from bicgen.codegen import generate_tree_def, generate_gc

lang = read_lang("lang.desc")
print(generate_tree_def(lang))
print(generate_gc(lang))
```

`bicgen.lang`:

- `read_lang(path)` and `parse_lang(text)` return a `Language` holding
  `tree_types`, `ctypes`, `base_type_pools` and `tree_pool`.
- `tokenize(text)` yields `Token` objects (`kind`, `value`, `line`,
  `col`), ending with a `TokenKind.EOF` token.
- `TreeType` and `CType` carry the declared names and a `props` mapping
  from property name to `InstantiatedType`. `TypePool` and
  `TypeAllocator` implement the member pooling described above;
  `TypePool.emit_declarations()` returns the C member lines.

`bicgen.codegen`: `generate_tree_def`, `generate_tree_base`,
`generate_gc` and `generate_dump` each take a `Language` and return the
text of one output file. `main_gentypes`, `main_gentree`, `main_gengc`
and `main_gendump` are the command entry points; each accepts an
optional argument list and returns the exit status.

`bicgen.tree`: `Tree` nodes have a `type` name, a `props` dictionary, a
`Locus` and a chain of member nodes. Chains are iterable and support
`append`, `splice` (which moves another chain's members onto the end)
and `len`. `Tree.is_a` compares the type and `Tree.check` raises
`TreeTypeMismatch` on a mismatch; `Tree.copy_from` makes a shallow copy.
`tree_make`, `get_identifier`, `chain_head` and `make_pointer_type`
build nodes.

`bicgen.typename`: `TypenameRegistry` starts with `__builtin_va_list`
and `_Float128`, records names with `add` (a string or an identifier
node) and answers `name in registry`. Between `set_include_file()` and
`unset_include_file()` names go to a separate list, which
`reset_include_typenames()` empties.

`bicgen.hashing`: `super_fast_hash(data)` returns the 32-bit
SuperFastHash of a string or bytes up to the first NUL byte.
`HashTable(bits)` has `2 ** bits` bins chosen from the low bits of the
hash; `add` puts a value at the front of its key's bin and `bin`
returns that bin's values, most recent first.

`bicgen.preprocess`: `Preprocessor` collects include directories with
`add_include_dir`, builds the command line with `build_command`, and
`run(include_lines, opts, line)` writes the include lines and the line
to a temporary file, runs the compiler (`gcc` by default) through the
shell and returns its output. A failure to start or a non-zero exit
raises `PreprocessorError`. `last_line(text)` returns the final line
without its terminator.

`bicgen.completion`: `is_compound_access` tells whether text contains a
`.` or `->` member access after its first character;
`split_compound_access` splits it at the rightmost operator into a
`CompoundAccess`, whose `object_expression()` gives a statement for the
accessed object (dereferenced for `->`) and whose
`full_expressions(members)` gives the completed access for each member
matching the prefix. `match_prefix` filters names by prefix and
`create_matches` builds a completion list: a single match on its own,
or the original text followed by every match.

## What this package does not do

It does not parse or evaluate C. There is no interpreter, no REPL and
no line editing: the completion helpers work on strings and member-name
lists supplied by the caller, and nothing here discovers the members of
a live object. The generated C files are meant to be compiled as part
of a separate interpreter; this package only writes them.