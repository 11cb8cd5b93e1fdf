from textwrap import dedent

from contract_analyzer.context.rust_extractor import RUST_PARAM_PREFIX
from contract_analyzer.context.scanning import (
    calculate_complexity,
    extract_body,
    extract_doc_comments,
    extract_module_doc_comments,
    line_number_at,
    parse_fields,
    parse_parameters,
    parse_tuple_fields,
    preceding_doc_comments,
    split_top_level,
)


def test_extract_body_nested_braces():
    source = "fn f() { a { b } c } rest"
    body = extract_body(source, source.index("{") + 1)
    assert body == "a { b } c"


def test_extract_body_unterminated_returns_partial():
    source = "fn f() { if x { y"
    body = extract_body(source, source.index("{") + 1)
    assert body == "if x { y"


def test_extract_body_at_end_of_input():
    assert extract_body("{", 1) == ""


def test_complexity_base_and_keywords():
    assert calculate_complexity("") == 1
    assert calculate_complexity("if a > 0 { true } else { false }") == 3
    assert calculate_complexity("match x { _ => loop {} }") == 3


def test_complexity_operators_and_word_boundaries():
    assert calculate_complexity("a && b || c?") == 4
    # iffy / elsewhere / format 不是关键词
    assert calculate_complexity("iffy elsewhere format") == 1


def test_line_number_at():
    source = "a\nb\nc"
    assert line_number_at(source, 0) == 1
    assert line_number_at(source, source.index("c")) == 3


def test_preceding_doc_comments_skips_attributes():
    source = dedent(
        """
        /// Adds numbers.
        /// Second line.
        #[inline]
        pub fn add() {}
        """
    )
    assert preceding_doc_comments(source, source.index("pub fn")) == [
        "Adds numbers.",
        "Second line.",
    ]


def test_preceding_doc_comments_block_comment():
    source = dedent(
        """
        /**
         * Block doc.
         */
        fn f() {}
        """
    )
    assert preceding_doc_comments(source, source.index("fn f")) == ["Block doc."]


def test_preceding_doc_comments_requires_adjacency():
    assert preceding_doc_comments("/// doc\n\nfn f() {}", 9) == []
    assert preceding_doc_comments("// plain\nfn f() {}", 9) == []
    source = "/// doc\nlet x = 1; fn f() {}"
    assert preceding_doc_comments(source, source.index("fn")) == []


def test_extract_doc_comments_single_line_block():
    assert extract_doc_comments("/** Short doc. */") == ["Short doc."]


def test_module_doc_comments_stop_at_code():
    source = dedent(
        """\
        //! Crate docs.
        //! More.

        use std::io;
        //! not header
        """
    )
    assert extract_module_doc_comments(source) == ["Crate docs.", "More."]


def test_module_doc_comments_skip_license_block():
    source = dedent(
        """\
        /* License */
        /*!
         * Module overview.
         */
        module a::b {}
        """
    )
    assert extract_module_doc_comments(source) == ["Module overview."]
    assert extract_module_doc_comments("") == []


def test_split_top_level_respects_nesting():
    parts = split_top_level("a: u8, b: Vec<(u8, u16)>, f: impl Fn(u8) -> u8")
    assert parts == ["a: u8", "b: Vec<(u8, u16)>", "f: impl Fn(u8) -> u8"]


def test_parse_parameters_strips_rust_prefixes():
    params = parse_parameters("&mut self, mut x: u64, y: &mut Vec<u8>", RUST_PARAM_PREFIX)
    assert [(p.name, p.type) for p in params] == [("x", "u64"), ("y", "&mut Vec<u8>")]
    assert parse_parameters("   ") == []


def test_parse_fields_ignores_comments_and_visibility():
    body = """
        pub owner: Pubkey,
        // comment: here
        balances: HashMap<Pubkey, u64>,
    """
    fields = parse_fields(body)
    assert [(f.name, f.type) for f in fields] == [
        ("owner", "Pubkey"),
        ("balances", "HashMap<Pubkey, u64>"),
    ]


def test_parse_tuple_fields():
    fields = parse_tuple_fields("pub u8, Vec<u16>")
    assert [(f.name, f.type) for f in fields] == [("0", "u8"), ("1", "Vec<u16>")]
