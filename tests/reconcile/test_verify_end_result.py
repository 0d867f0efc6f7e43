"""Tests for the reconciliation command."""

import json

from bulksender.reconcile.verify_end_result import cli, main


ADDR_1 = "0x" + "1" * 40
ADDR_2 = "0xAbCdEf0123456789abcdef0123456789ABCDEF01"


class TestVerifyEndResult:
    """Tests for verify_end_result.main."""

    def test_writes_results(self, write_csv, tmp_path) -> None:
        """Test snapshots are reconciled and written as camelCase JSON."""
        start = write_csv(f"{ADDR_1},100\n", "start.csv")
        end = write_csv(f"address,current_balance\n{ADDR_1},150\n{ADDR_2.lower()},10\n", "end.csv")
        recipients = write_csv(f"{ADDR_1},50\n{ADDR_2},\"30\"\n", "recipients.csv")
        output = tmp_path / "out" / "results.json"

        assert main(start, end, recipients, output) == 0

        data = json.loads(output.read_text())
        assert [row["address"] for row in data] == [ADDR_1, ADDR_2.lower()]
        assert data[0]["matches"] is True
        assert data[0]["difference"] is None
        assert data[1]["calculatedEnd"] == "30"
        assert data[1]["difference"] == "-20"

    def test_duplicates_summed(self, write_csv, tmp_path) -> None:
        """Test a recipient listed twice is expected to receive both amounts."""
        start = write_csv("", "start.csv")
        end = write_csv(f"address,current_balance\n{ADDR_1},\"1,500\"\n", "end.csv")
        recipients = write_csv(f"{ADDR_1},1000\n{ADDR_1},500\n", "recipients.csv")
        output = tmp_path / "results.json"

        assert main(start, end, recipients, output) == 0

        data = json.loads(output.read_text())
        assert len(data) == 1
        assert data[0]["expectedAmount"] == "1500"
        assert data[0]["matches"] is True

    def test_missing_file(self, write_csv, tmp_path) -> None:
        """Test a missing snapshot exits 1 without writing."""
        recipients = write_csv(f"{ADDR_1},1\n", "recipients.csv")
        output = tmp_path / "results.json"

        code = main(tmp_path / "nope.csv", tmp_path / "nope.csv", recipients, output)

        assert code == 1
        assert not output.exists()

    def test_cli_header_flags(self, write_csv, tmp_path) -> None:
        """Test header handling can be switched per snapshot."""
        start = write_csv(f"address,balance\n{ADDR_1},1\n", "start.csv")
        end = write_csv(f"{ADDR_1},3\n", "end.csv")
        recipients = write_csv(f"{ADDR_1},2\n", "recipients.csv")
        output = tmp_path / "results.json"

        code = cli(
            [
                "--start", str(start),
                "--end", str(end),
                "--recipients", str(recipients),
                "--output", str(output),
                "--start-header",
                "--no-end-header",
            ]
        )

        assert code == 0
        assert json.loads(output.read_text())[0]["matches"] is True
