from minify_tools.css_rules import (
    at_rule_class_names,
    class_name_of,
    decompose_rule,
    join_selector_group,
    minify_css,
    split_rule_lines,
)


def test_minify_css_one_rule_per_line():
    css = """
    /* header */
    .a, .b {
        color: red;
    }
    view { padding: 0px; }
    """
    assert minify_css(css) == ".a,.b{color:red}\nview{padding:0}"


def test_minify_css_idempotent():
    once = minify_css(".a { margin: 0 } .b { x: 1; }")
    assert minify_css(once) == once


def test_minify_css_empty():
    assert minify_css("") == ""
    assert minify_css("   \n") == ""


def test_split_rule_lines_skips_blank():
    assert list(split_rule_lines(".a{x:1}\n\n  \nview{y:2}\n")) == [".a{x:1}", "view{y:2}"]


def test_decompose_rule():
    assert decompose_rule(".a,.b,view{color:red}") == ([".a", ".b", "view"], "{color:red}")


def test_decompose_rule_without_brace_passes_through():
    assert decompose_rule("}") == (["}"], "")


def test_class_name_of():
    assert class_name_of(".btn") == "btn"
    assert class_name_of("view") is None
    assert class_name_of("#main") is None


def test_join_selector_group():
    assert join_selector_group(["A", "bar"], "{x:1}") == ".A,.bar{x:1}"


def test_decompose_rule_at_rule_is_not_split():
    assert decompose_rule("@media screen,print{.a{x:1}") == (["@media screen,print{.a{x:1}"], "")


def test_minify_css_import_statement_on_own_line():
    css = '@import "common.wxss";\n.foo{color:red}\n.bar{margin:0 }'
    assert minify_css(css) == '@import "common.wxss";\n.foo{color:red}\n.bar{margin:0}'


def test_minify_css_keeps_at_rule_block_on_one_line():
    css = "@media (max-width:100px){.a{x:1}.b{y:2}}\n.c{z:3}"
    assert minify_css(css) == "@media(max-width:100px){.a{x:1}.b{y:2}}\n.c{z:3}"


def test_minify_css_font_face_and_keyframes():
    css = '@font-face{font-family:icon;src:url("icon.ttf")}\n@keyframes spin{from{opacity:1}to{opacity:.5}}\n.x{y:1}'
    lines = minify_css(css).split("\n")
    assert len(lines) == 3
    assert lines[0].startswith("@font-face{")
    assert lines[1] == "@keyframes spin{from{opacity:1}to{opacity:.5}}"
    assert lines[2] == ".x{y:1}"


def test_minify_css_charset_prologue():
    lines = minify_css('@charset "utf-8";\n.foo { color: red; }').split("\n")
    assert lines[0].startswith("@charset")
    assert lines[-1] == ".foo{color:red}"


def test_minify_css_ignores_braces_in_strings():
    css = '.a::after{content:"}"}.b{x:1}'
    assert minify_css(css) == '.a::after{content:"}"}\n.b{x:1}'
    assert minify_css(minify_css(css)) == minify_css(css)


def test_at_rule_class_names():
    assert at_rule_class_names("@media(max-width:100px){.a{x:1}.b-c:hover{y:.5}}") == {"a", "b-c"}
    assert at_rule_class_names(".a{x:1}") == set()


def test_at_rule_class_names_skips_urls_and_strings():
    line = '@font-face{font-family:"icon.font";src:url(icon.ttf)}'
    assert at_rule_class_names(line) == set()
    assert at_rule_class_names('@import "common.wxss";') == set()
