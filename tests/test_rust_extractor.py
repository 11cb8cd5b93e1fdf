from textwrap import dedent

import pytest

from contract_analyzer import analyze
from contract_analyzer.context.models import ModuleKind, Visibility


VAULT_SOURCE = dedent(
    """\
    //! Vault program.
    use anchor_lang::prelude::*;
    use std::collections::HashMap;
    extern crate serde;

    /// A vault.
    #[derive(Debug, Clone)]
    pub struct Vault {
        pub owner: Pubkey,
        pub amount: u64,
    }

    pub struct Marker;

    pub struct Pair(pub u8, u16);

    pub const MAX_AMOUNT: u64 = 1_000;
    static mut COUNTER: u32 = 0;
    const SEED: &[u8; 5] = b"vault";

    impl Vault {
        /// Creates a vault.
        pub fn new(owner: Pubkey) -> Self {
            Vault { owner, amount: 0 }
        }

        fn bump(&mut self, by: u64) -> Result<()> {
            self.amount = self.amount.checked_add(by).unwrap();
            Ok(())
        }
    }

    pub async unsafe fn risky() {
        unsafe { do_it() }
    }
    """
)


@pytest.fixture
def vault():
    return analyze(VAULT_SOURCE, "programs/vault/src/vault.rs")


def test_simple_public_function():
    module = analyze("pub fn f(a: u64) -> bool { if a > 0 { true } else { false } }", "lib.rs")

    assert len(module.functions) == 1
    func = module.functions[0]
    assert func.name == "f"
    assert func.visibility == Visibility.PUBLIC
    assert [(p.name, p.type) for p in func.parameters] == [("a", "u64")]
    assert func.return_type == "bool"
    assert func.complexity_score == 3
    assert func.line_number == 1
    assert func.is_entry_function is False


def test_module_header(vault):
    assert vault.name == "vault"
    assert vault.module_kind == ModuleKind.RUST_CRATE
    assert vault.module_doc_comments == ["Vault program."]
    assert vault.total_lines == VAULT_SOURCE.count("\n") + 1


def test_impl_methods_extracted_once(vault):
    names = [f.name for f in vault.functions]
    assert names == ["new", "bump", "risky"]


def test_method_details(vault):
    new, bump, risky = vault.functions

    assert new.visibility == Visibility.PUBLIC
    assert new.doc_comments == ["Creates a vault."]
    assert new.return_type == "Self"
    assert [(p.name, p.type) for p in new.parameters] == [("owner", "Pubkey")]
    assert new.body_text == "Vault { owner, amount: 0 }"

    assert bump.visibility == Visibility.PRIVATE
    assert [(p.name, p.type) for p in bump.parameters] == [("by", "u64")]
    assert bump.return_type == "Result<()>"
    assert bump.doc_comments == []

    assert risky.modifiers == ["async", "unsafe"]
    assert risky.return_type is None
    assert risky.line_number == VAULT_SOURCE[:VAULT_SOURCE.index("pub async")].count("\n") + 1


def test_structs(vault):
    names = [s.name for s in vault.structs]
    assert names == ["Vault", "Marker", "Pair"]

    vault_struct, marker, pair = vault.structs
    assert vault_struct.doc_comments == ["A vault."]
    assert [(f.name, f.type) for f in vault_struct.fields] == [("owner", "Pubkey"), ("amount", "u64")]
    assert marker.fields == []
    assert [(f.name, f.type) for f in pair.fields] == [("0", "u8"), ("1", "u16")]
    assert not any(s.has_key or s.has_store or s.has_copy or s.has_drop for s in vault.structs)


def test_constants(vault):
    by_name = {c.name: c for c in vault.constants}
    assert list(by_name) == ["MAX_AMOUNT", "COUNTER", "SEED"]

    assert by_name["MAX_AMOUNT"].visibility == Visibility.PUBLIC
    assert by_name["MAX_AMOUNT"].type == "u64"
    assert by_name["MAX_AMOUNT"].value == "1_000"
    assert by_name["MAX_AMOUNT"].is_mutable is False

    assert by_name["COUNTER"].is_mutable is True
    assert by_name["COUNTER"].visibility == Visibility.PRIVATE

    assert by_name["SEED"].type == "&[u8; 5]"
    assert by_name["SEED"].value == 'b"vault"'


def test_imports_and_dependencies(vault):
    assert vault.imports == ["anchor_lang::prelude::*", "std::collections::HashMap", "serde"]
    assert vault.dependencies == ["anchor_lang", "serde"]


def test_features_and_insights(vault):
    assert "derive_macros" in vault.language_features
    assert "unsafe_code" in vault.language_features
    assert any("unsafe" in insight for insight in vault.security_insights)
    assert any("unwrap()" in insight for insight in vault.security_insights)


def test_unsafe_insight_absent_without_unsafe():
    module = analyze("fn f() { g() }", "lib.rs")
    assert not any("unsafe" in insight for insight in module.security_insights)


def test_trait_declarations_without_body_are_skipped():
    source = dedent(
        """\
        pub trait Shape {
            fn area(&self) -> f64;
            fn name(&self) -> String { String::from("shape") }
        }
        """
    )
    module = analyze(source, "shape.rs")
    assert [f.name for f in module.functions] == ["name"]
    assert module.functions[0].return_type == "String"


def test_generics_and_where_clause():
    source = "pub fn get<T: Into<u64>>(v: T) -> u64 where T: Copy { v.into() }"
    func = analyze(source, "lib.rs").functions[0]
    assert func.name == "get"
    assert func.return_type == "u64"
    assert [(p.name, p.type) for p in func.parameters] == [("v", "T")]
    assert func.body_text == "v.into()"


def test_line_numbers_follow_source_order():
    module = analyze("fn a() {}\n\nfn b() {}", "lib.rs")
    assert [(f.name, f.line_number) for f in module.functions] == [("a", 1), ("b", 3)]


def test_unterminated_body_is_partial():
    module = analyze("fn broken() { if x { y", "lib.rs")
    assert len(module.functions) == 1
    assert module.functions[0].body_text == "if x { y"
    assert module.functions[0].complexity_score == 2


def test_array_types_in_signatures():
    module = analyze("pub fn set(key: [u8; 32]) -> bool { true }", "lib.rs")
    assert [(p.name, p.type) for p in module.functions[0].parameters] == [("key", "[u8; 32]")]
    assert module.functions[0].return_type == "bool"

    func = analyze("pub fn hash(x: u8) -> [u8; 32] { [x; 32] }", "lib.rs").functions[0]
    assert func.name == "hash"
    assert func.return_type == "[u8; 32]"
    assert func.body_text == "[x; 32]"


def test_tuple_struct_over_array():
    module = analyze("pub struct Pubkey(pub [u8; 32]);", "lib.rs")
    assert [s.name for s in module.structs] == ["Pubkey"]
    assert [(f.name, f.type) for f in module.structs[0].fields] == [("0", "[u8; 32]")]


def test_constant_values_with_semicolons():
    source = "const SEP: char = ';';\nconst GRID: [[u8; 2]; 2] = [[0; 2]; 2];\nconst MSG: &str = \"a;b\";"
    constants = analyze(source, "lib.rs").constants
    assert [(c.name, c.type, c.value) for c in constants] == [
        ("SEP", "char", "';'"),
        ("GRID", "[[u8; 2]; 2]", "[[0; 2]; 2]"),
        ("MSG", "&str", '"a;b"'),
    ]


def test_closure_bound_in_generics():
    func = analyze("fn apply<F: Fn(u8) -> u8>(f: F) -> u8 { f(1) }", "lib.rs").functions[0]
    assert func.name == "apply"
    assert [(p.name, p.type) for p in func.parameters] == [("f", "F")]
    assert func.return_type == "u8"
