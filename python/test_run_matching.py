"""Unit tests for the DIMACS command line front end."""

import io
import os
import os.path
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

import run_matching


class TestReadDimacsGraph(unittest.TestCase):
    """Test read_dimacs_graph() function."""

    def test_read(self):
        f = io.StringIO(
            "c small graph\n"
            "p edge 4 3\n"
            "\n"
            "e 1 2 5\n"
            "e 2 3 1.5\n"
            "e 3 4 -2\n")
        edges = run_matching.read_dimacs_graph(f)
        self.assertEqual(edges, [(0, 1, 5), (1, 2, 1.5), (2, 3, -2)])
        self.assertIsInstance(edges[0][2], int)
        self.assertIsInstance(edges[1][2], float)

    def test_bad_problem_line(self):
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("p max 4 3\n"))
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("p edge 4\n"))

    def test_bad_edge_line(self):
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("e 1 2\n"))
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("e 0 2 3\n"))
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("e 1 2 x\n"))

    def test_unknown_line(self):
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_graph(io.StringIO("x 1 2\n"))


class TestWriteDimacsMatching(unittest.TestCase):
    """Test write_dimacs_matching() function."""

    def test_write_int(self):
        f = io.StringIO()
        run_matching.write_dimacs_matching(f, 21, [-1, 3, 4, 1, 2])
        self.assertEqual(f.getvalue(), "s 21\nm 2 4\nm 3 5\n")

    def test_write_float(self):
        f = io.StringIO()
        run_matching.write_dimacs_matching(f, 2.5, [1, 0])
        self.assertEqual(f.getvalue(), "s 2.5\nm 1 2\n")


class TestCalcMatchingWeight(unittest.TestCase):

    def test_weight(self):
        edges = [(1,2,8), (1,3,9), (2,3,10), (3,4,7)]
        self.assertEqual(
            run_matching.calc_matching_weight(edges, [-1, 2, 1, 4, 3]),
            15)

    def test_unmatched(self):
        self.assertEqual(
            run_matching.calc_matching_weight([(0,1,3)], [-1, -1]),
            0)


class TestMain(unittest.TestCase):
    """Test the main program on files in a temporary directory."""

    def _write_input(self, dirname, name, text):
        filename = os.path.join(dirname, name)
        with open(filename, "w", encoding="ascii") as f:
            f.write(text)
        return filename

    def test_outdir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            outdir = os.path.join(tmpdir, "out")
            os.mkdir(outdir)
            input1 = self._write_input(
                tmpdir, "g1.edge",
                "p edge 4 4\ne 1 2 8\ne 1 3 9\ne 2 3 10\ne 3 4 7\n")
            input2 = self._write_input(
                tmpdir, "g2.edge",
                "p edge 5 5\n"
                "e 2 3 2\ne 2 4 -2\ne 3 4 1\ne 3 5 -1\ne 4 5 -6\n")
            with redirect_stdout(io.StringIO()):
                ret = run_matching.main(
                    ["--check-optimum", "--outdir", outdir, input1, input2])
            self.assertEqual(ret, 0)

            with open(os.path.join(outdir, "g1.out"), encoding="ascii") as f:
                self.assertEqual(f.read(), "s 15\nm 1 2\nm 3 4\n")
            with open(os.path.join(outdir, "g2.out"), encoding="ascii") as f:
                self.assertEqual(f.read(), "s 2\nm 2 3\n")

    def test_maxcard(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input1 = self._write_input(
                tmpdir, "g.edge",
                "e 2 3 2\ne 2 4 -2\ne 3 4 1\ne 3 5 -1\ne 4 5 -6\n")
            out = io.StringIO()
            with redirect_stdout(out):
                ret = run_matching.main(["--maxcard", input1])
            self.assertEqual(ret, 0)
            self.assertEqual(out.getvalue(), "s -3\nm 2 4\nm 3 5\n")

    def test_bad_input_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input1 = self._write_input(tmpdir, "bad.edge", "e 1 1 3\n")
            err = io.StringIO()
            with redirect_stdout(io.StringIO()), redirect_stderr(err):
                ret = run_matching.main([input1])
            self.assertEqual(ret, 1)
            self.assertIn("ERROR:", err.getvalue())

    def test_multiple_inputs_need_outdir(self):
        err = io.StringIO()
        with redirect_stderr(err):
            ret = run_matching.main(["a.edge", "b.edge"])
        self.assertEqual(ret, 1)
        self.assertIn("--outdir", err.getvalue())


if __name__ == "__main__":
    unittest.main()
