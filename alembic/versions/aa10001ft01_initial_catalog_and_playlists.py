"""initial catalog, playlists and submissions

Revision ID: aa10001ft01
Revises:
Create Date: 2026-09-28 10:00:00.000000

Hey future me - BASELINE schema.

playlist_memberships:
- (playlist_id, track_id) UNIQUE: a track is in a playlist at most once
- (playlist_id, position) only INDEXED: moves shift rows one at a time, a unique
  constraint would fail halfway through the shift
- both FKs ON DELETE CASCADE: deleting a playlist or a track drops its memberships

track_submissions.published_track_id is ON DELETE SET NULL so removing a catalog
track never deletes the moderation history.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'aa10001ft01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'tracks',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False, index=True),
        sa.Column('artist', sa.String(255), nullable=False, index=True),
        sa.Column('genre', sa.String(20), nullable=False, index=True),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('audio_url', sa.String(512), nullable=False),
        sa.Column('youtube_url', sa.String(512), nullable=True),
        sa.Column('spotify_url', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'playlists',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'playlist_memberships',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'playlist_id',
            sa.String(36),
            sa.ForeignKey('playlists.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'track_id',
            sa.String(36),
            sa.ForeignKey('tracks.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('added_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint(
            'playlist_id', 'track_id', name='uq_playlist_memberships_playlist_track'
        ),
    )
    op.create_index(
        'ix_playlist_memberships_position',
        'playlist_memberships',
        ['playlist_id', 'position'],
    )

    op.create_table(
        'track_submissions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('artist', sa.String(255), nullable=False),
        sa.Column('genre', sa.String(20), nullable=False),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('youtube_url', sa.String(512), nullable=True),
        sa.Column('spotify_url', sa.String(512), nullable=True),
        sa.Column('submitted_by', sa.String(255), nullable=False, index=True),
        sa.Column(
            'status', sa.String(20), nullable=False, server_default='pending', index=True
        ),
        sa.Column('admin_notes', sa.String(500), nullable=True),
        sa.Column(
            'published_track_id',
            sa.String(36),
            sa.ForeignKey('tracks.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )


def downgrade() -> None:
    op.drop_table('track_submissions')
    op.drop_index('ix_playlist_memberships_position', table_name='playlist_memberships')
    op.drop_table('playlist_memberships')
    op.drop_table('playlists')
    op.drop_table('tracks')
