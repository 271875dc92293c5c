import pytest

BERKELEY_OSM = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="37.8700" lon="-122.2600"/>
  <node id="2" lat="37.8700" lon="-122.2590"/>
  <node id="3" lat="37.8710" lon="-122.2590"/>
  <node id="4" lat="37.8750" lon="-122.2550">
    <tag k="name" v="Soda Hall"/>
    <tag k="amenity" v="university"/>
  </node>
  <node id="5" lat="37.8720" lon="-122.2580"/>
  <node id="6" lat="37.8600" lon="-122.2400">
    <tag k="name" v="Top Dog"/>
  </node>
  <node id="7" lat="37.8610" lon="-122.2410">
    <tag k="name" v="Top-Dog!"/>
  </node>
  <way id="100">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="residential"/>
    <tag k="name" v="Hearst Avenue"/>
  </way>
  <way id="101">
    <nd ref="3"/>
    <nd ref="5"/>
    <nd ref="999"/>
    <tag k="highway" v="primary"/>
  </way>
  <way id="102">
    <nd ref="5"/>
    <nd ref="4"/>
    <tag k="highway" v="footway"/>
  </way>
</osm>
"""


@pytest.fixture
def osm_file(tmp_path):
    p = tmp_path / "berkeley.osm"
    p.write_text(BERKELEY_OSM)
    return p
