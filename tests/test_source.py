"""Unit test for the osmium entity source."""
import os
import tempfile
import unittest

from driveway_review.filters import candidate_predicate
from driveway_review.model.entity import EntityId, Info, Kind, Member
from driveway_review.source import DecodeError, PbfSource

META = ('version="2" timestamp="2020-01-01T00:00:00Z" uid="42" '
        'user="{user}" changeset="1001"')

ARCHIVE = f"""<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <node id="1" lat="43.1" lon="-71.1" {META.format(user="zed")}/>
  <node id="2" lat="43.2" lon="-71.2" {META.format(user="zed")}>
    <tag k="barrier" v="gate"/>
  </node>
  <node id="3" lat="43.3" lon="-71.3"/>
  <node id="4" lat="43.4" lon="-71.4"/>
  <node id="5" lat="43.5" lon="-71.5"/>
  <node id="6" lat="43.6" lon="-71.6"/>
  <node id="9" lat="43.9" lon="-71.9">
    <tag k="barrier" v="gate"/>
  </node>
  <way id="101" {META.format(user="alice")}>
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="service" v="driveway"/>
    <tag k="access" v="private"/>
  </way>
  <way id="102" {META.format(user="alice")}>
    <nd ref="4"/>
    <nd ref="3"/>
    <tag k="highway" v="service"/>
    <tag k="service" v="driveway"/>
    <tag k="access" v="private"/>
  </way>
  <way id="103" {META.format(user="bob")}>
    <nd ref="5"/>
    <nd ref="6"/>
    <tag k="service" v="driveway"/>
    <tag k="access" v="private"/>
  </way>
  <way id="104" {META.format(user="alice")}>
    <nd ref="5"/>
    <nd ref="6"/>
    <tag k="service" v="driveway"/>
    <tag k="access" v="public"/>
  </way>
  <relation id="201">
    <member type="way" ref="102" role="outer"/>
    <member type="node" ref="9" role="label"/>
    <tag k="type" v="multipolygon"/>
  </relation>
</osm>
"""

MISSING = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <node id="1" lat="1.0" lon="2.0"/>
  <way id="1" user="alice" uid="1" version="1" changeset="1">
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="service" v="driveway"/>
    <tag k="access" v="private"/>
  </way>
</osm>
"""


class SourceTest(unittest.TestCase):
    """Unit test for PbfSource."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def archive(self, content: str, name: str = 'archive.osm') -> str:
        """Write archive content to a file and return its path."""
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w', encoding='utf-8') as file:
            file.write(content)
        return path

    def test_select_with_dependencies(self):
        """Test selection of ways and their nodes."""
        source = PbfSource(self.archive(ARCHIVE))
        data = source.select_with_dependencies(candidate_predicate({'alice'}),
                                               kinds=(Kind.WAY,))
        self.assertEqual(sorted(data),
                         [EntityId.node(1), EntityId.node(2),
                          EntityId.node(3), EntityId.node(4),
                          EntityId.way(101), EntityId.way(102)])
        for key, entity in data.items():
            self.assertEqual(entity.osm_id, key)

    def test_conversion(self):
        """Test conversion of osmium objects to entities."""
        source = PbfSource(self.archive(ARCHIVE))
        data = source.select_with_dependencies(candidate_predicate({'alice'}))
        info = Info(user='zed', uid=42, visible=True, version=2,
                    changeset=1001, timestamp=1577836800)

        node = data[EntityId.node(2)]
        self.assertAlmostEqual(node.lat, 43.2)
        self.assertAlmostEqual(node.lon, -71.2)
        self.assertEqual(node.tags, {'barrier': 'gate'})
        self.assertEqual(node.info, info)

        way = data[EntityId.way(102)]
        self.assertEqual(way.nodes, [4, 3])
        self.assertEqual(list(way.tags), ['highway', 'service', 'access'])
        self.assertEqual(way.user, 'alice')

    def test_absent_metadata(self):
        """Test that metadata missing from the archive is None."""
        source = PbfSource(self.archive(ARCHIVE))
        data = source.select_with_dependencies(candidate_predicate({'alice'}))
        node = data[EntityId.node(3)]
        self.assertEqual(node.tags, {})
        self.assertEqual(node.info, Info())

    def test_relation_dependencies(self):
        """Test that references are followed recursively."""
        source = PbfSource(self.archive(ARCHIVE))
        data = source.select_with_dependencies(
            lambda e: e.osm_id == EntityId.relation(201))
        self.assertEqual(sorted(data),
                         [EntityId.node(3), EntityId.node(4),
                          EntityId.node(9), EntityId.way(102),
                          EntityId.relation(201)])
        self.assertEqual(data[EntityId.relation(201)].members,
                         [Member(EntityId.way(102), 'outer'),
                          Member(EntityId.node(9), 'label')])

    def test_nothing_selected(self):
        """Test predicate matching nothing."""
        source = PbfSource(self.archive(ARCHIVE))
        self.assertEqual(
            source.select_with_dependencies(candidate_predicate({'nobody'})),
            {})

    def test_missing_reference(self):
        """Test that references absent from the archive are skipped."""
        source = PbfSource(self.archive(MISSING))
        data = source.select_with_dependencies(candidate_predicate({'alice'}))
        self.assertEqual(sorted(data), [EntityId.node(1), EntityId.way(1)])
        self.assertEqual(data[EntityId.way(1)].nodes, [1, 2])

    def test_missing_file(self):
        """Test that a missing archive raises FileNotFoundError."""
        source = PbfSource(os.path.join(self.tmpdir.name, 'missing.osm.pbf'))
        with self.assertRaises(FileNotFoundError):
            source.select_with_dependencies(candidate_predicate({'alice'}))

    def test_decode_error(self):
        """Test that a malformed archive raises DecodeError."""
        source = PbfSource(self.archive('<osm version="0.6"><node id=',
                                        'broken.osm'))
        with self.assertRaises(DecodeError):
            source.select_with_dependencies(candidate_predicate({'alice'}))

    def test_node_without_location(self):
        """Test that a node with no coordinates raises DecodeError."""
        content = MISSING.replace('<node id="1" lat="1.0" lon="2.0"/>',
                                  '<node id="1" version="1"/>')
        source = PbfSource(self.archive(content))
        with self.assertRaises(DecodeError):
            source.select_with_dependencies(candidate_predicate({'alice'}))
