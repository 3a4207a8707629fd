from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from gabung.cli import cmd_list, cmd_merge, cmd_split


class CLIIntegrationTests(unittest.TestCase):
    def run_cli(self, args, *, expect: int | None = 0, cwd: Path | None = None):
        cmd = [sys.executable, "-m", "gabung.cli"] + list(args)
        env = os.environ.copy()
        repo_root = Path(__file__).resolve().parent
        existing = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = str(repo_root) if not existing else f"{repo_root}{os.pathsep}{existing}"
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
        )
        if expect is not None and proc.returncode != expect:
            raise AssertionError(
                f"CLI exited {proc.returncode}, expected {expect}\nCommand: {' '.join(cmd)}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"
            )
        return proc

    def test_merge_split_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "file1.jpg").write_bytes(os.urandom(5000))
            (root / "file2.txt").write_text("hello\n")
            (root / "file3.zip").write_bytes(b"PK\x03\x04" + os.urandom(100))
            inputs = [str(root / n) for n in ("file1.jpg", "file2.txt", "file3.zip")]
            out = root / "sus.jpg"

            proc = self.run_cli(["-m", *inputs, "-o", str(out)])
            self.assertIn("Wrote", proc.stdout)

            listed = self.run_cli(["-l", str(out)])
            self.assertIn("file2.txt", listed.stdout)
            self.assertIn("Total: 3 files", listed.stdout)

            outdir = root / "sus"
            split_proc = self.run_cli(["-s", str(out), "-o", str(outdir)])
            self.assertIn("Split 3 files", split_proc.stdout)
            for n in ("file1.jpg", "file2.txt", "file3.zip"):
                self.assertEqual((outdir / n).read_bytes(), (root / n).read_bytes())

    def test_no_arguments_prints_help(self):
        proc = self.run_cli([], expect=1)
        self.assertIn("usage", proc.stdout.lower())

    def test_usage_errors(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("a")
            # Single input
            self.run_cli(["-m", str(root / "a.txt"), "-o", str(root / "o.bin")], expect=2)
            # Missing output
            self.run_cli(["-m", str(root / "a.txt"), str(root / "a.txt")], expect=2)
            self.run_cli(["-s", str(root / "o.bin")], expect=2)
            # Unknown shape
            self.run_cli(["-x", "foo"], expect=2)
            self.run_cli(["-m", str(root / "a.txt"), "-s", str(root / "a.txt"), "-o", "x"], expect=2)
            # Listing takes no output or quiet flag
            self.run_cli(["-l", str(root / "a.txt"), "-o", str(root / "x")], expect=2)
            self.run_cli(["-l", str(root / "a.txt"), "--quiet"], expect=2)

    def test_internal_failure_reports_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            bogus = root / "bogus.bin"
            bogus.write_bytes(b"\x00" * 16)
            proc = self.run_cli(["-s", str(bogus), "-o", str(root / "out")], expect=2)
            self.assertIn("Error:", proc.stderr)
            self.assertFalse((root / "out").exists())

            proc = self.run_cli(["-m", str(root / "missing1"), str(root / "missing2"), "-o", str(root / "o.bin")], expect=2)
            self.assertIn("Failed to open", proc.stderr)


class CommandFunctionTests(unittest.TestCase):
    def test_commands_in_process(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_bytes(b"foo")
            (root / "b.log").write_bytes(b"barz")
            out = root / "out.bin"
            self.assertTrue(cmd_merge(str(out), [str(root / "a.txt"), str(root / "b.log")], quiet=True))
            self.assertEqual(out.stat().st_size, 543)
            self.assertTrue(cmd_list(str(out)))
            self.assertTrue(cmd_split(str(out), outdir=str(root / "d"), quiet=True))
            self.assertEqual((root / "d" / "b.log").read_bytes(), b"barz")

    def test_no_footer_command(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_bytes(b"foo")
            (root / "b.log").write_bytes(b"barz")
            out = root / "cat.bin"
            cmd_merge(str(out), [str(root / "a.txt"), str(root / "b.log")], no_footer=True, quiet=True)
            self.assertEqual(out.read_bytes(), b"foobarz")


if __name__ == "__main__":
    unittest.main()
