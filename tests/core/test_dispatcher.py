"""Tests for dispatch, aggregation and the resolution policy."""

import pytest

from gx.core.config import Options
from gx.core.dispatcher import (
    LABEL_WIDTH,
    SELECT_PROMPT,
    Candidate,
    CandidateSet,
    MultipleMatches,
    NoMatch,
    SingleMatch,
    act,
    collect,
    dispatch,
    format_item,
    resolve,
)
from gx.core.registry import Handler, Registry, Scope
from gx.core.resolvers import CustomResolver, HandlerContext, LiteralPattern


def fixed(name: str, url: str | None, **kwargs) -> Handler:
    """Handler that always returns url."""
    return Handler(name, CustomResolver(lambda ctx: url), **kwargs)


def options_with(*handlers: Handler) -> Options:
    return Options(handlers=Registry(handlers))


def urls(outcome) -> list[str]:
    return [c.url for c in outcome.candidates]


class TestCandidateSet:
    def test_keeps_order(self):
        cs = CandidateSet()
        cs.add("a", "https://a")
        cs.add("b", "https://b")
        assert [c.handler for c in cs] == ["a", "b"]
        assert cs[1] == Candidate("b", "https://b")

    def test_first_producer_keeps_url(self):
        cs = CandidateSet()
        assert cs.add("a", "https://same")
        assert not cs.add("b", "https://same")
        assert len(cs) == 1
        assert cs.by_handler("b") is None
        assert cs.by_handler("a").url == "https://same"

    def test_empty_urls_ignored(self):
        cs = CandidateSet()
        assert not cs.add("a", None)
        assert not cs.add("b", "")
        assert len(cs) == 0

    def test_remove_reindexes(self):
        cs = CandidateSet()
        for name in "abc":
            cs.add(name, f"https://{name}")
        assert cs.remove("a") == Candidate("a", "https://a")
        assert cs.by_handler("c") == Candidate("c", "https://c")
        assert cs[0].handler == "b"
        assert "https://a" not in cs

    def test_remove_missing(self):
        assert CandidateSet().remove("search") is None

    def test_scheme_literal(self):
        cs = CandidateSet()
        cs.add("search", "https://s")
        assert cs.scheme_literal is None
        cs.add("url_scheme", "https://u")
        assert cs.scheme_literal == Candidate("url_scheme", "https://u")


class TestResolve:
    def make(self, *pairs) -> CandidateSet:
        cs = CandidateSet()
        for name, url in pairs:
            cs.add(name, url)
        return cs

    def test_nothing(self):
        assert resolve(self.make()) == NoMatch()

    def test_single(self):
        assert resolve(self.make(("cve", "https://nvd"))) == SingleMatch("https://nvd", "cve")

    def test_search_alone_is_kept(self):
        assert resolve(self.make(("search", "https://s"))) == SingleMatch("https://s", "search")

    def test_search_demoted(self):
        outcome = resolve(self.make(("cve", "https://nvd"), ("search", "https://s")))
        assert outcome == SingleMatch("https://nvd", "cve")

    def test_search_demoted_among_many(self):
        outcome = resolve(self.make(("a", "https://a"), ("search", "https://s"), ("b", "https://b")))
        assert isinstance(outcome, MultipleMatches)
        assert urls(outcome) == ["https://a", "https://b"]

    def test_scheme_short_circuits(self):
        outcome = resolve(self.make(("a", "https://a"), ("b", "https://b"), ("url_scheme", "https://u")))
        assert outcome == SingleMatch("https://u", "url_scheme")

    def test_multiple_in_aggregation_order(self):
        outcome = resolve(self.make(("z", "https://z"), ("a", "https://a")))
        assert [c.handler for c in outcome.candidates] == ["z", "a"]


class TestCollect:
    def test_runs_handlers_in_order(self, ctx):
        handlers = [fixed("b", "https://b"), fixed("a", "https://a")]
        cs = collect(ctx("x"), handlers)
        assert [c.handler for c in cs] == ["b", "a"]

    def test_dedupes_across_handlers(self, ctx):
        handlers = [fixed("a", "https://same"), fixed("b", "https://same"), fixed("c", "https://c")]
        cs = collect(ctx("x"), handlers)
        assert [c.url for c in cs] == ["https://same", "https://c"]

    def test_failing_resolver_contributes_nothing(self, ctx):
        def boom(ctx):
            raise RuntimeError("broken handler")

        handlers = [Handler("bad", CustomResolver(boom)), fixed("good", "https://good")]
        cs = collect(ctx("x"), handlers)
        assert [c.handler for c in cs] == ["good"]

    def test_non_string_result_ignored(self, ctx):
        handlers = [Handler("odd", CustomResolver(lambda ctx: 42))]
        assert len(collect(ctx("x"), handlers)) == 0

    def test_literal_pattern(self, ctx):
        handlers = [Handler("ticket", LiteralPattern.compile(r"(JIRA-\d+)"))]
        cs = collect(ctx("see JIRA-12 now"), handlers)
        assert cs[0].url == "JIRA-12"


class TestDispatch:
    def test_scoped_handler_only_in_scope(self):
        options = options_with(
            fixed("py", "https://py", scope=Scope(file_types=frozenset({"python"}))),
            fixed("any", "https://any"),
        )
        assert dispatch("x", options, file_type="python") == MultipleMatches(
            (Candidate("py", "https://py"), Candidate("any", "https://any"))
        )
        assert dispatch("x", options, file_type="go") == SingleMatch("https://any", "any")

    def test_disabled_handlers_never_run(self):
        called = []

        def spy(ctx):
            called.append(ctx.text)
            return "https://spy"

        options = options_with(Handler("spy", CustomResolver(spy), disabled=True))
        assert dispatch("x", options) == NoMatch()
        assert called == []

    def test_context_reaches_resolvers(self, remotes):
        seen = []

        def spy(ctx: HandlerContext):
            seen.append((ctx.mode, ctx.text, ctx.file_type, ctx.file_name, ctx.remotes))
            return None

        options = options_with(Handler("spy", CustomResolver(spy)))
        dispatch("abc", options, mode="v", file_type="lua", file_name="init.lua", remotes=remotes)
        assert seen == [("v", "abc", "lua", "init.lua", remotes)]

    @pytest.mark.parametrize("text", [
        "https://example.com/a",
        "CVE-2023-12345",
        "acme/widgets#42",
        'serde = "1.0"',
        "hello world",
        "",
    ])
    def test_idempotent(self, run, text):
        assert run(text) == run(text)

    def test_scheme_priority_with_builtins(self, run, remotes):
        text = "https://github.com/acme/widgets/commit/4b825dc642cb6eb9a060e54bf8d69288fbee4904#42"
        assert run(text, remotes=remotes) == SingleMatch(text, "url_scheme")

    def test_empty_text(self, run):
        assert run("") == NoMatch()

    def test_cargo_manifest_only(self, run):
        from conftest import only

        result = run('serde = "1.0"', file_name="Cargo.toml", options=only("cargo"))
        assert result == SingleMatch("https://crates.io/crates/serde", "cargo")


class TestAct:
    def test_single_opens(self):
        opened = []
        act(SingleMatch("https://a"), opened.append, None)
        assert opened == ["https://a"]

    def test_no_match_is_silent(self):
        opened, prompted = [], []
        act(NoMatch(), opened.append, lambda *args: prompted.append(args))
        assert opened == [] and prompted == []

    def test_multiple_prompts_then_opens_choice(self):
        opened = []
        candidates = (Candidate("github", "https://g"), Candidate("nvim_plugin", "https://n"))

        def chooser(items, prompt, fmt, on_choice):
            assert list(items) == list(candidates)
            assert prompt == SELECT_PROMPT
            on_choice(items[1])

        act(MultipleMatches(candidates), opened.append, chooser)
        assert opened == ["https://n"]

    def test_cancelled_choice_is_silent(self):
        opened = []
        candidates = (Candidate("a", "https://a"), Candidate("b", "https://b"))
        act(MultipleMatches(candidates), opened.append, lambda items, prompt, fmt, on_choice: on_choice(None))
        assert opened == []

    def test_choice_may_never_return(self):
        opened = []
        candidates = (Candidate("a", "https://a"), Candidate("b", "https://b"))
        act(MultipleMatches(candidates), opened.append, lambda *args: None)
        assert opened == []


class TestFormatItem:
    def test_pads_to_longest_builtin(self):
        assert format_item(Candidate("cve", "https://x")) == "(cve)          https://x"
        assert format_item(Candidate("package_json", "https://x")) == "(package_json) https://x"

    def test_long_names_unpadded(self):
        assert format_item(Candidate("x" * (LABEL_WIDTH + 3), "u")) == f"({'x' * (LABEL_WIDTH + 3)}) u"
