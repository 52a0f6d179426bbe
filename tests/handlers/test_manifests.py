"""Test cases for manifest handlers (Brewfile, Cargo.toml, package.json)."""

import pytest

from gx.handlers import brewfile, cargo, package_json

#
# ==========================================================================
# Brewfile
# ==========================================================================
#
BREWFILE_TESTS = [
    ('brew "git"', "https://formulae.brew.sh/formula/git"),
    ('brew "wget", args: ["with-iri"]', "https://formulae.brew.sh/formula/wget"),
    ('cask "firefox"', "https://formulae.brew.sh/cask/firefox"),
    ('cask "visual-studio-code"', "https://formulae.brew.sh/cask/visual-studio-code"),
    #
    # brew wins over cask on the same line
    ('cask "iterm2"; brew "git"', "https://formulae.brew.sh/formula/git"),
    #
    # Not entries
    ('tap "homebrew/bundle"', None),
    ("brew git", None),
    ('mas "Xcode", id: 497799835', None),
]


@pytest.mark.parametrize("text,expected", BREWFILE_TESTS)
def test_brewfile(ctx, text: str, expected: str | None) -> None:
    assert brewfile.resolve(ctx(text)) == expected


#
# ==========================================================================
# Cargo.toml
# ==========================================================================
#
CARGO_TESTS = [
    ('serde = "1.0"', "https://crates.io/crates/serde"),
    ('serde_json = "1"', "https://crates.io/crates/serde_json"),
    ('tokio = { version = "1", features = ["full"] }', "https://crates.io/crates/tokio"),
    ('proc-macro2 = "1.0"', "https://crates.io/crates/proc-macro2"),
    ('anyhow="1.0" ', None),
    ("[dependencies]", None),
    ("serde", None),
    # Non-ASCII names, and no match inside one
    ('sérde = "1.0"', None),
    ('крейт = "1.0"', None),
]


@pytest.mark.parametrize("text,expected", CARGO_TESTS)
def test_cargo(ctx, text: str, expected: str | None) -> None:
    assert cargo.resolve(ctx(text)) == expected


#
# ==========================================================================
# package.json
# ==========================================================================
#
PACKAGE_JSON_TESTS = [
    ('"lodash": "^4.17.21",', "https://www.npmjs.com/package/lodash"),
    ('"@types/node":"^20"', "https://www.npmjs.com/package/@types/node"),
    ('"react-dom":', "https://www.npmjs.com/package/react-dom"),
    ('"lodash"', None),
    ("lodash: 4", None),
]


@pytest.mark.parametrize("text,expected", PACKAGE_JSON_TESTS)
def test_package_json(ctx, text: str, expected: str | None) -> None:
    assert package_json.resolve(ctx(text)) == expected


class TestManifestScopes:
    """Manifest handlers only apply in their own files."""

    def test_cargo_line_in_cargo_toml(self, run):
        result = run('serde = "1.0"', file_type="toml", file_name="/src/app/Cargo.toml")
        assert result.url == "https://crates.io/crates/serde"
        assert result.handler == "cargo"

    def test_cargo_line_elsewhere_is_a_search(self, run):
        result = run('serde = "1.0"', file_type="toml", file_name="/src/app/pyproject.toml")
        assert result.handler == "search"

    def test_brewfile_by_name(self, run):
        result = run('brew "git"', file_name="/home/me/dotfiles/Brewfile")
        assert result.url == "https://formulae.brew.sh/formula/git"

    def test_package_json_by_filetype(self, run):
        result = run('"lodash":', file_type="json", file_name="tsconfig.json")
        assert result.url == "https://www.npmjs.com/package/lodash"
