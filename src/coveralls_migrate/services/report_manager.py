from coveralls_migrate.core.models import MigrationResult

RULE = "=" * 60
SUPPORT_EMAIL = "support@coveralls.io"


def plan_message(count: int) -> str:
    return f"Found {count} repositories to migrate"


def success_message(repo_name: str) -> str:
    return f"✓ Added {repo_name} to Coveralls Official GitHub App"


def render_report(result: MigrationResult) -> str:
    """
    Format the end-of-run summary. Failures, if any, are listed first;
    an empty batch gets the "no migration required" line instead of counts.
    """
    lines = ["", RULE]

    if result.failures:
        lines.append("⚠ Warning: Some repositories failed to migrate")
        lines.append("")
        lines.append("Please ensure your GitHub token has admin rights to the organization.")
        lines.append(f"For help, contact {SUPPORT_EMAIL}")
        lines.append("Failed repositories:")
        lines.extend(f"  ✗ {failure}" for failure in result.failures)
        lines.append("")

    if result.total == 0:
        lines.append("No migration required - all repositories are already using the GitHub App")
    else:
        lines.append("Migration Summary:")
        lines.append(f"  Total repositories: {result.total}")
        lines.append(f"  Successfully migrated: {result.successful}")
        lines.append(f"  Failed: {result.failed}")
        lines.append("")
        lines.append("✓ Migration complete!")

    lines.append(RULE)
    return "\n".join(lines)
