from pathlib import Path
import tempfile
import unittest

from bench_ProfilerPowerReporter.core.errors import NamingConventionError, PathError
from bench_ProfilerPowerReporter.core.grouping import build_workloads, group_files, split_name
from bench_ProfilerPowerReporter.core.model import InputFile, Workload
from bench_ProfilerPowerReporter.utils.detect import discover_inputs


def _files(*names):
    return [InputFile(name=n, path=Path("/captures") / n) for n in names]


class GroupingTests(unittest.TestCase):
    def test_groups_by_benchmark_then_framework_in_input_order(self):
        files = _files("reactA_bench1_1.json", "reactA_bench1_2.json", "vueB_bench1_1.json")
        groups = group_files(files)

        self.assertEqual(["bench1"], list(groups))
        self.assertEqual(["reactA", "vueB"], list(groups["bench1"]))
        self.assertEqual(["reactA_bench1_1.json", "reactA_bench1_2.json"],
                         [f.name for f in groups["bench1"]["reactA"]])
        self.assertEqual(["vueB_bench1_1.json"], [f.name for f in groups["bench1"]["vueB"]])

    def test_first_occurrence_order_is_kept(self):
        files = _files("svelte_todo_1.json", "react_list_1.json", "react_todo_1.json", "svelte_todo_2.json")
        groups = group_files(files)
        self.assertEqual(["todo", "list"], list(groups))
        self.assertEqual(["svelte", "react"], list(groups["todo"]))

    def test_one_workload_per_pair(self):
        files = _files("a_x_1.json", "a_x_2.json", "b_x_1.json", "a_y_1.json")
        workloads = build_workloads(group_files(files))
        self.assertEqual([("x", "a"), ("x", "b"), ("y", "a")], [w.key for w in workloads])
        self.assertEqual(2, len(workloads[0].files))

    def test_bad_names_are_rejected_with_the_file_name(self):
        for bad in ("react_todo.json", "reactTodo1.json", "react__1.json", "_todo_1.json"):
            with self.assertRaises(NamingConventionError) as ctx:
                group_files(_files("ok_bench_1.json", bad))
            self.assertIn(bad, str(ctx.exception))

    def test_split_name(self):
        self.assertEqual(("vue", "todo", "12"), split_name("vue_todo_12.json"))

    def test_workload_requires_files(self):
        with self.assertRaises(ValueError):
            Workload("todo", "react", ())


class DiscoveryTests(unittest.TestCase):
    def test_directory_collects_json_in_natural_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("r_b_10.json", "r_b_2.json", "r_b_1.json", "notes.txt"):
                (root / name).write_text("{}", encoding="utf-8")
            found = discover_inputs(root)
            self.assertEqual(["r_b_1.json", "r_b_2.json", "r_b_10.json"], [f.name for f in found])

    def test_single_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "r_b_1.json"
            path.write_text("{}", encoding="utf-8")
            found = discover_inputs(path)
            self.assertEqual([InputFile("r_b_1.json", path.resolve())], found)

    def test_path_errors(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            with self.assertRaises(PathError):
                discover_inputs(root / "missing")
            with self.assertRaises(PathError):
                discover_inputs(root)  # empty folder
            txt = root / "r_b_1.txt"
            txt.write_text("", encoding="utf-8")
            with self.assertRaises(PathError):
                discover_inputs(txt)


if __name__ == "__main__":
    unittest.main()
