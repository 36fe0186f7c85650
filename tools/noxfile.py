import nox

nox.options.reuse_existing_virtualenvs = True
nox.options.stop_on_first_error = True


@nox.session
def test(session):
    session.install("-e", "..[test]")
    session.run("pytest", *session.posargs)


@nox.session
def typing(session):
    session.install("-e", "..")
    session.install("mypy")
    session.run("mypy", "fix_default_branches")
