import json

from typer.testing import CliRunner

from swedbank_pi.cli import app

runner = CliRunner()
URL = "https://pi.swedbank.com/public/api/v3/agreement/providers"


def _write_keys(tmp_path, key_pairs, algorithm="ES256"):
    private_pem, public_pem = key_pairs[algorithm]
    private_path = tmp_path / "merchant.pem"
    public_path = tmp_path / "merchant.pub"
    private_path.write_text(private_pem)
    public_path.write_text(public_pem)
    return private_path, public_path


def test_sign_then_verify(tmp_path, key_pairs):
    private_path, public_path = _write_keys(tmp_path, key_pairs)
    payload = tmp_path / "body.json"
    payload.write_bytes(b'{"amount":"1.00"}')

    signed = runner.invoke(
        app,
        [
            "jws", "sign", URL,
            "--merchant-id", "M1",
            "--country", "ee",
            "--private-key", str(private_path),
            "--payload", str(payload),
            "--algorithm", "ES256",
        ],
    )
    assert signed.exit_code == 0, signed.output
    token = signed.output.strip()

    verified = runner.invoke(
        app, ["jws", "verify", token, "--public-key", str(public_path), "--payload", str(payload)]
    )
    assert verified.exit_code == 0
    assert "Signature valid" in verified.output

    payload.write_bytes(b'{"amount":"2.00"}')
    mismatch = runner.invoke(
        app, ["jws", "verify", token, "--public-key", str(public_path), "--payload", str(payload)]
    )
    assert mismatch.exit_code == 1


def test_sign_reads_stdin(tmp_path, key_pairs):
    private_path, _ = _write_keys(tmp_path, key_pairs)
    result = runner.invoke(
        app,
        ["jws", "sign", URL, "--merchant-id", "M1", "--private-key", str(private_path),
         "--algorithm", "ES256"],
        input="{}",
    )
    assert result.exit_code == 0
    assert ".." in result.output


def test_sign_rejects_unknown_algorithm(tmp_path, key_pairs):
    private_path, _ = _write_keys(tmp_path, key_pairs)
    result = runner.invoke(
        app,
        ["jws", "sign", URL, "--merchant-id", "M1", "--private-key", str(private_path),
         "--algorithm", "HS256"],
        input="{}",
    )
    assert result.exit_code == 1


def test_verify_malformed_token(tmp_path, key_pairs):
    _, public_path = _write_keys(tmp_path, key_pairs)
    result = runner.invoke(
        app, ["jws", "verify", "abc", "--public-key", str(public_path)], input="{}"
    )
    assert result.exit_code == 2


def test_inspect(tmp_path, key_pairs):
    from swedbank_pi.security import sign

    token = sign(b"{}", URL, "M1", "LV", key_pairs["RS512"][0], "RS512")
    result = runner.invoke(app, ["jws", "inspect", token])

    assert result.exit_code == 0
    info = json.loads(result.output)
    assert info["valid_format"] is True
    assert info["header"]["kid"] == "LV:M1"


def test_inspect_survives_nested_header():
    from swedbank_pi.security.encoding import b64url_encode

    token = b64url_encode("[" * 100_000 + "]" * 100_000) + "..AAAA"
    result = runner.invoke(app, ["jws", "inspect", token])

    assert result.exit_code == 0
    assert json.loads(result.output)["error"].startswith("Exception while inspecting")


def test_key_info(tmp_path, bank_key):
    cert_path = tmp_path / "bank.crt"
    cert_path.write_text(bank_key["certificate"])

    result = runner.invoke(app, ["key", "info", str(cert_path)])

    assert result.exit_code == 0
    assert json.loads(result.output)["subject"] == {"CN": "pi.swedbank.com"}


def test_key_info_invalid(tmp_path):
    bad = tmp_path / "bad.pem"
    bad.write_text("nope")

    result = runner.invoke(app, ["key", "info", str(bad)])

    assert result.exit_code == 1
