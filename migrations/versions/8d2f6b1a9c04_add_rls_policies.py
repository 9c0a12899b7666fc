"""add_rls_policies

Revision ID: 8d2f6b1a9c04
Revises: 4c1e9a7f2b3d
Create Date: 2026-10-18 09:20:03.551877

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8d2f6b1a9c04"
down_revision: str | Sequence[str] | None = "4c1e9a7f2b3d"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add Row Level Security policies for profiles and posts.

    The API connects with a service role that bypasses RLS; these policies
    apply to direct Supabase client connections.
    """
    for table in ["profiles", "posts"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles policies ---
    # SELECT: any signed-in user can read profiles
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING (
                (SELECT auth.uid()) IS NOT NULL
            );
    """)
    # INSERT: a user can only create their own profile
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (
                user_id = (SELECT auth.uid())
            );
    """)
    # UPDATE: only the owner
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (
                user_id = (SELECT auth.uid())
            );
    """)

    # --- Posts policies ---
    # SELECT: any signed-in user can read the feed
    op.execute("""
        CREATE POLICY posts_select ON posts
            FOR SELECT USING (
                (SELECT auth.uid()) IS NOT NULL
            );
    """)
    # INSERT: only as yourself
    op.execute("""
        CREATE POLICY posts_insert ON posts
            FOR INSERT WITH CHECK (
                user_id = (SELECT auth.uid())
            );
    """)


def downgrade() -> None:
    """Remove Row Level Security policies."""
    op.execute("DROP POLICY IF EXISTS posts_insert ON posts;")
    op.execute("DROP POLICY IF EXISTS posts_select ON posts;")
    op.execute("DROP POLICY IF EXISTS profiles_update ON profiles;")
    op.execute("DROP POLICY IF EXISTS profiles_insert ON profiles;")
    op.execute("DROP POLICY IF EXISTS profiles_select ON profiles;")

    for table in ["posts", "profiles"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
