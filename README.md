# inkreader

Building blocks for an e-paper book reader. The package is pure Python and
has no third-party dependencies.

## What it contains

- **A baseline JPEG decoder** (`inkreader.jpeg_decoder`). It reads
  grayscale and YCbCr baseline images with 4:4:4, 4:2:2 or 4:2:0 sampling,
  honours restart intervals, and can shrink the output by 2, 4 or 8. The
  output is always RGB888. A grayscale image comes out as gray RGB.
  Progressive and other non-baseline images are rejected. The lower-level
  parts live in their own modules:
  - `inkreader.jpeg_tables` holds `JResult`, `JpegError`, `byteclip` and
    `parse_quant_segment`.
  - `inkreader.jpeg_bits` holds `BitReader`.
  - `inkreader.jpeg_huffman` holds `HuffmanTable` and
    `parse_huffman_segment`.
  - `inkreader.jpeg_idct` holds `block_idct`.
- **UI actions** (`inkreader.actions.UIAction`): `NONE`, `UP`, `DOWN`,
  `SELECT` and `LAST_INTERACTION`.
- **Battery monitoring** (`inkreader.battery`). `Battery` is an abstract
  base class. `ADCBattery` wraps a function that returns the voltage at the
  ADC pin in millivolts. It doubles that value to undo a 1:2 divider.
  `voltage_to_percentage` turns a cell voltage into a charge estimate from
  0 to 100.
- **Buttons** (`inkreader.buttons`):
  - `GPIOButton` is a level-triggered button. Each call to
    `handle_interrupt` toggles it between pressed and released. On release
    it calls its callback if the press lasted longer than
    `BUTTON_DEBOUNCE_US` microseconds.
  - `ButtonSet` groups up, down and select buttons on numbered pins.
    `did_wake_from_deep_sleep` takes a `WakeCause`. `action_for_wake_mask`
    picks the action for a wake-up pin mask.
- **Touch controls** (`inkreader.touch`). `TouchControls.handle_touch`
  maps a tap to an action and reports it through the callback.
  `render` and `render_pressed_state` draw the button strip through any
  object with the drawing methods of the `Renderer` protocol.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Decoding a JPEG

```python
from inkreader.jpeg_decoder import decode_jpeg

with open("cover.jpg", "rb") as f:
    width, height, pixels = decode_jpeg(f.read(), 0)
```

The second argument is the scale. `0` gives full size, and `1`, `2` and `3`
divide each dimension by 2, 4 and 8. `pixels` holds the image row by row,
three bytes per pixel.

To receive the image one MCU at a time, use `JpegDecoder` directly. It
accepts bytes or a binary file object. Constructing it reads the headers,
and it then exposes `width`, `height`, `components` and
`restart_interval`.

```python
from inkreader.jpeg_decoder import JpegDecoder

decoder = JpegDecoder(data)

def output(rect, pixels):
    # rect is a Rect(left, right, top, bottom), inclusive; pixels holds its RGB bytes
    ...
    return True  # return a false value to stop decoding

decoder.decompress(output, 0)
```

Every failure raises `inkreader.jpeg_tables.JpegError`. Its `result`
attribute holds a `JResult` that says what went wrong:

- `JResult.INP` for a truncated stream.
- `JResult.FMT1` for corrupt data.
- `JResult.FMT3` for an unsupported JPEG process.
- `JResult.MEM2` for a header segment over 512 bytes.
- `JResult.PAR` for a scale outside 0..3.
- `JResult.INTR` when the output function stops decoding.

## Battery level

```python
from inkreader.battery import ADCBattery, voltage_to_percentage

battery = ADCBattery(lambda: 1950.0)  # millivolts at the ADC pin
battery.setup()
print(battery.voltage)      # 3900.0
print(battery.percentage)   # same as voltage_to_percentage(3900.0)
```

Reading `voltage` before `setup()` raises `RuntimeError`.

## What the package does not do

inkreader does not talk to any hardware. It has no display driver, no
GPIO, ADC or touch-panel access, and no sleep handling. Buttons, touch
controls and the battery are fed through callbacks and renderer objects
that you supply. It also has no book list, EPUB parsing or page layout,
and it provides no command-line program.