from patchspace.core.tree_builder import build_tree, iter_sorted, render_tree, sorted_children

def test_round_trip_of_ingested_paths():
    root = build_tree(["src/a.js", "src/b/c.css", "readme.md"])

    assert set(root.children) == {"src", "readme.md"}
    src = root.children["src"]
    assert src.is_dir and src.path == "src"
    readme = root.children["readme.md"]
    assert not readme.is_dir and readme.children is None

    assert set(src.children) == {"a.js", "b"}
    assert not src.children["a.js"].is_dir
    b = src.children["b"]
    assert b.is_dir and b.path == "src/b"
    assert list(b.children) == ["c.css"]
    assert b.children["c.css"].path == "src/b/c.css"
    assert not b.children["c.css"].is_dir

def test_empty_index_gives_empty_root():
    root = build_tree([])
    assert root.is_dir
    assert root.children == {}
    assert render_tree(root) == ""

def test_deterministic_regardless_of_order():
    paths = ["z/y.txt", "a.txt", "z/x/w.txt", "m/n.txt"]
    assert build_tree(paths) == build_tree(list(reversed(paths)))
    assert build_tree(paths) == build_tree(paths)

def test_shared_directories_are_reused():
    root = build_tree(["p/a.txt", "p/b.txt", "p/q/c.txt", "p/q/d.txt"])
    assert list(root.children) == ["p"]
    assert len(root.children["p"].children) == 3
    assert len(root.children["p"].children["q"].children) == 2

def test_sorted_children_directories_first_then_name():
    root = build_tree(["b.txt", "A.txt", "zeta/x.txt", "alpha/y.txt"])
    assert [n.name for n in sorted_children(root)] == ["alpha", "zeta", "A.txt", "b.txt"]

def test_iter_sorted_depths():
    root = build_tree(["src/a.js", "src/b/c.css", "readme.md"])
    assert [(depth, node.name) for depth, node in iter_sorted(root)] == [
        (0, "src"), (1, "b"), (2, "c.css"), (1, "a.js"), (0, "readme.md"),
    ]

def test_render_tree():
    root = build_tree(["src/a.js", "readme.md"])
    assert render_tree(root) == "src/\n  a.js\nreadme.md"

def test_name_used_as_file_and_directory_becomes_directory():
    root = build_tree(["docs", "docs/index.md"])
    docs = root.children["docs"]
    assert docs.is_dir
    assert list(docs.children) == ["index.md"]
