from reference_tool.cli.main import app

app(prog_name="reference-tool")
