import unittest
from types import SimpleNamespace

from tagfn import G, each, group, if_, safe, tag, with_buffer, within
from tagfn.core.exceptions import UnsupportedContentError


def _explode(context, buffer, escaped):
    raise AssertionError("untaken branch was rendered")


class TestEach(unittest.TestCase):
    def setUp(self) -> None:
        self.context = {
            "rootValue": "bla1",
            "collection": [
                {"val": "test1"},
                {"val": "test2", "internal": [{"val": "test3"}]},
            ],
        }

    def test_iterates_collection(self):
        template = tag("div", each("collection", tag("a", G("entry.val")), tag("span")))
        self.assertEqual(
            template(self.context),
            "<div><a>test1</a><span></span><a>test2</a><span></span></div>",
        )

    def test_preserves_parent(self):
        template = tag("div", each("collection", tag("a", G("entry.val"), G("parent.rootValue"))))
        self.assertEqual(template(self.context), "<div><a>test1bla1</a><a>test2bla1</a></div>")

    def test_preserves_root_on_all_levels(self):
        template = tag(
            "div",
            each(
                "collection",
                tag("a", each("entry.internal", tag("i", G("entry.val"), G("$root.rootValue")))),
            ),
        )
        self.assertEqual(template(self.context), "<div><a></a><a><i>test3bla1</i></a></div>")

    def test_index(self):
        template = each("items", tag("li", G("index"), ":", G("entry.name")))
        self.assertEqual(
            template({"items": [{"name": "A"}, {"name": "B"}]}),
            "<li>0:A</li><li>1:B</li>",
        )

    def test_entries_share_parent_and_root(self):
        parents = []
        roots = []

        def spy(c):
            parents.append(c["parent"])
            roots.append(c["$root"])

        data = {"items": [1, 2, 3]}
        each("items", spy)(data)
        self.assertEqual(len(parents), 3)
        self.assertTrue(all(p is parents[0] for p in parents))
        self.assertTrue(all(r is data for r in roots))

    def test_named_getter_example(self):
        template = each("items", tag("li", G("entry.name")))
        self.assertEqual(
            template({"items": [{"name": "A"}, {"name": "B"}]}),
            "<li>A</li><li>B</li>",
        )

    def test_empty_or_missing_collection(self):
        template = each("items", tag("li", G("entry")))
        self.assertEqual(template({}), "")
        self.assertEqual(template({"items": None}), "")
        self.assertEqual(template({"items": []}), "")
        self.assertEqual(template(), "")

    def test_callable_collection_getter(self):
        template = each(lambda c: sorted(c["tags"]), tag("b", G("entry")))
        self.assertEqual(template({"tags": ["z", "a"]}), "<b>a</b><b>z</b>")

    def test_mapping_collection(self):
        template = each("meta", tag("dt", G("index")), tag("dd", G("entry")))
        self.assertEqual(
            template({"meta": {"a": 1, "b": 2}}),
            "<dt>a</dt><dd>1</dd><dt>b</dt><dd>2</dd>",
        )

    def test_does_not_mutate_outer_context(self):
        data = {"items": [1]}
        each("items", G("entry"))(data)
        self.assertEqual(data, {"items": [1]})

    def test_rejects_mapping_content(self):
        with self.assertRaises(UnsupportedContentError):
            each("items", {"class": "x"})


class TestWithin(unittest.TestCase):
    def setUp(self) -> None:
        self.context = {
            "rootValue": "bla1",
            "collection": [
                {"val": "test1"},
                {"val": "test2", "internal": [{"val": "test3"}]},
            ],
        }

    def test_shifts_context(self):
        template = tag(
            "div",
            each("collection", within("entry", tag("a", G("val")), tag("span"))),
        )
        self.assertEqual(
            template(self.context),
            "<div><a>test1</a><span></span><a>test2</a><span></span></div>",
        )

    def test_preserves_original_context_in_parent(self):
        template = within("collection", G("$parent.rootValue"))
        self.assertEqual(template(self.context), "bla1")

    def test_preserves_root_context(self):
        template = within("collection.1", within("internal", G("$root.rootValue")))
        self.assertEqual(template(self.context), "bla1")

    def test_root_after_shift_and_nested_each(self):
        template = within(
            "collection.1",
            each("internal", tag("i", G("entry.val"), G("$root.rootValue"), G("parent.val"))),
        )
        self.assertEqual(template(self.context), "<i>test3bla1test2</i>")

    def test_missing_value_renders_fail_soft(self):
        template = within("nothing", tag("p", G("val")))
        self.assertEqual(template(self.context), "<p></p>")

    def test_function_getter_sees_shifted_scalar(self):
        self.assertEqual(within("title", lambda c: c)({"title": "Hi"}), "Hi")
        self.assertEqual(within("title", lambda c: c.upper())({"title": "Hi"}), "HI")
        self.assertEqual(
            within("title", tag("a", {"title": lambda c: c}))({"title": "Hi"}),
            '<a title="Hi"></a>',
        )

    def test_function_getter_reads_object_attributes(self):
        data = {"user": SimpleNamespace(name="Ann")}
        self.assertEqual(within("user", tag("b", lambda u: u.name))(data), "<b>Ann</b>")
        self.assertEqual(tag("b", lambda c: c.name)(SimpleNamespace(name="Bo")), "<b>Bo</b>")


class TestGroupAndSafe(unittest.TestCase):
    def test_group_concatenates(self):
        self.assertEqual(
            group(tag("div", "test1"), tag("div", "test2"))(),
            "<div>test1</div><div>test2</div>",
        )

    def test_group_keeps_context(self):
        self.assertEqual(group(G("a"), "-", G("b"))({"a": 1, "b": "x"}), "1-x")

    def test_safe_disables_escaping(self):
        self.assertEqual(tag("div", safe("&&"))(), "<div>&&</div>")
        self.assertEqual(
            tag("div", safe(tag("span", G("bla"), "&"), "&"))({"bla": "&&"}),
            "<div><span>&&&</span>&</div>",
        )

    def test_safe_standalone(self):
        self.assertEqual(safe(tag("b", "&"))(), "<b>&</b>")

    def test_safe_covers_attributes(self):
        self.assertEqual(
            safe(tag("a", {"href": G("url")}))({"url": "/x&y"}),
            '<a href="/x&y"></a>',
        )

    def test_escaping_resumes_outside_safe(self):
        self.assertEqual(group(safe("<b>"), "<b>")(), "<b>&lt;b&gt;")


class TestIf(unittest.TestCase):
    def test_picks_branch(self):
        template = if_(G("bla"), tag("div"), tag("span"))
        self.assertEqual(template({"bla": True}), "<div></div>")
        self.assertEqual(template({"bla": False}), "<span></span>")

    def test_object_predicate(self):
        self.assertEqual(if_({"bla": 55}, tag("div"), tag("span"))({"bla": 55}), "<div></div>")
        self.assertEqual(if_({"bla": 56}, tag("div"), tag("span"))({"bla": 55}), "<span></span>")
        self.assertEqual(
            if_({"a": 1, "b.c": "x"}, "yes", "no")({"a": 1, "b": {"c": "x"}}), "yes"
        )
        self.assertEqual(if_({"a": None}, "yes", "no")({}), "no")

    def test_missing_condition_takes_false_branch(self):
        self.assertEqual(if_("flag", "yes", "no")({}), "no")
        self.assertEqual(if_("flag", "yes")({}), "")

    def test_untaken_branch_is_never_invoked(self):
        calls = []

        def side_effect(c):
            calls.append(c)
            return "side"

        explode = with_buffer(_explode)
        self.assertEqual(if_(G("ok"), tag("p", "yes"), explode)({"ok": True}), "<p>yes</p>")
        self.assertEqual(if_(G("ok"), explode, tag("p", "no"))({"ok": False}), "<p>no</p>")
        self.assertEqual(if_(G("ok"), "yes", side_effect)({"ok": True}), "yes")
        self.assertEqual(calls, [])

    def test_branch_lists(self):
        template = if_(G("ok"), [tag("b", "1"), tag("b", "2")], "none")
        self.assertEqual(template({"ok": 1}), "<b>1</b><b>2</b>")


if __name__ == "__main__":
    unittest.main()
